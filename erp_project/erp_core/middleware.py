from django.utils.deprecation import MiddlewareMixin


class PortalContactMiddleware(MiddlewareMixin):
    # Run on every request and
    # attach a .contact attribute to the request, based on the logged-in user
    def process_request(self, request):
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated and user.is_portal_user:
            # portal users only ever act for their own contact
            request.contact = user.contact
        else:
            # back office users and anonymous requests
            request.contact = None
