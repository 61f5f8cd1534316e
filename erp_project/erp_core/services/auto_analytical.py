import logging
from typing import NamedTuple, Optional

from ..models import AnalyticalAccount, AutoAnalyticalRule, Product

logger = logging.getLogger(__name__)

PRODUCT_DEFAULT = "Product Default"


class CostCenterMatch(NamedTuple):
    analytical_account: AnalyticalAccount
    rule_name: str


def rule_matches(rule, category=None, name=None, vendor=None) -> bool:
    """
    A rule matches when any one of its conditions holds:
    category equality, case-insensitive name substring, vendor equality.
    A rule without conditions matches every line.
    """
    if not rule.has_conditions:
        return True
    if rule.product_category and category == rule.product_category:
        return True
    if rule.product_name_contains and name and \
            rule.product_name_contains.lower() in name.lower():
        return True
    vendor_id = getattr(vendor, "pk", vendor)
    if rule.vendor_id and vendor_id is not None and rule.vendor_id == vendor_id:
        return True
    return False


def resolve_cost_center(
    product: Optional[Product] = None,
    category: Optional[str] = None,
    name: Optional[str] = None,
    vendor=None,
    rules=None,
) -> Optional[CostCenterMatch]:
    """
    Pick the cost center for one line.
    Workflow:
        1. The product's static default cost center wins.
        2. Otherwise active rules are tried by ascending priority (then id).
        3. The first matching rule wins.
        4. No match returns None; the line simply stays untagged.
    Pass `rules` to reuse one rule query for many lines.
    """
    if product is not None:
        if product.analytical_account_id:
            return CostCenterMatch(product.analytical_account, PRODUCT_DEFAULT)
        category = category or product.category
        name = name or product.name

    if rules is None:
        rules = AutoAnalyticalRule.objects.in_priority_order().select_related(
            "analytical_account")
    for rule in rules:
        if rule_matches(rule, category=category, name=name, vendor=vendor):
            return CostCenterMatch(rule.analytical_account, rule.name)
    return None


def apply_auto_analytical(lines, vendor=None):
    """
    Fill `analytical_account` of every line mapping that has none.
    Lines that already carry a cost center keep it. Read-only: nothing is saved.
    Returns the same list, mutated in place.
    """
    rules = list(
        AutoAnalyticalRule.objects.in_priority_order().select_related(
            "analytical_account"))
    for line in lines:
        if line.get("analytical_account"):
            continue
        product = line.get("product")
        match = resolve_cost_center(product, vendor=vendor, rules=rules)
        if match is None:
            line["analytical_account"] = None
            continue
        line["analytical_account"] = match.analytical_account
        logger.debug("Line for %s assigned to %s by %s",
                     product, match.analytical_account.code, match.rule_name)
    return lines
