"""
Eligibility - Criteria Checker.

============================================================
CAPABILITY-BASED CRITERION DISPATCH
============================================================

Each CriterionKind has exactly one handler
`(activity, criterion) -> bool`. The built-in table covers
every kind except `custom`; custom criteria are dispatched
by `params["name"]` to handlers added with `register()`.

A criterion with no handler, or whose handler raises, is
not met. Neither case aborts scoring of the other criteria.

Legacy `"key<op>value"` check strings are converted to
Criterion objects by `parse_check()`.

============================================================
"""

from typing import Callable, Dict, Iterable, List, Optional
import logging

from activity_insights import ChainActivity, UserActivity

from .config import EligibilityConfig, get_config
from .exceptions import CriterionParseError, UnsupportedCriterionError
from .models import ComparisonOperator, Criterion, CriterionKind, CriterionResult


logger = logging.getLogger(__name__)


CriterionHandler = Callable[[UserActivity, Criterion], bool]


# =============================================================
# PARSING
# =============================================================


_EXACT_KEYS: Dict[str, CriterionKind] = {
    "chain": CriterionKind.CHAIN,
    "protocol": CriterionKind.PROTOCOL,
    "nft_platform": CriterionKind.NFT_PLATFORM,
    "bridge_to": CriterionKind.BRIDGE_TO,
    "bridge_count": CriterionKind.BRIDGE_COUNT,
    "cross_chain_tx": CriterionKind.CROSS_CHAIN_TX,
}

_CHAIN_SUFFIXES: Dict[str, CriterionKind] = {
    "_tx": CriterionKind.CHAIN_TX_COUNT,
    "_protocols": CriterionKind.CHAIN_PROTOCOL_COUNT,
    "_balance": CriterionKind.CHAIN_BALANCE,
}


def parse_check(check: str, description: str = "") -> Criterion:
    """
    Parse a legacy check string such as "base_tx>=10" or "protocol=zora".

    Operators are tried in the order >=, <=, >, <, =. Keys are
    matched exactly first, then by `{chain}_tx`, `{chain}_protocols`
    and `{chain}_balance` suffix. Any other key becomes a
    `protocol_mention` of the value.

    Raises:
        CriterionParseError: no operator, empty side, or a
            non-integer value for a numeric kind
    """
    text = (check or "").strip().lower()

    for operator in ComparisonOperator:
        if operator.value in text:
            parts = [p.strip() for p in text.split(operator.value)]
            break
    else:
        raise CriterionParseError(check, "no comparison operator")

    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise CriterionParseError(check, "expected exactly 'key<op>value'")

    key, raw_value = parts
    params: Dict[str, object] = {}

    if key in _EXACT_KEYS:
        kind = _EXACT_KEYS[key]
    else:
        kind = CriterionKind.PROTOCOL_MENTION
        for suffix, suffix_kind in _CHAIN_SUFFIXES.items():
            if key.endswith(suffix) and len(key) > len(suffix):
                kind = suffix_kind
                params["chain"] = key[: -len(suffix)]
                break

    if kind.is_numeric:
        try:
            params["value"] = int(raw_value)
        except ValueError:
            raise CriterionParseError(check, f"'{raw_value}' is not an integer")
        params["operator"] = operator
    elif kind == CriterionKind.CHAIN:
        params["chain"] = raw_value
    elif kind != CriterionKind.CHAIN_BALANCE:
        params["target"] = raw_value

    return Criterion(kind=kind, params=params, description=description or check)


# =============================================================
# BUILT-IN HANDLERS
# =============================================================


def _chains_matching(activity: UserActivity, chain: str) -> List[ChainActivity]:
    return [c for c in activity.chains if chain in c.chain_name.lower()]


def _compare(actual: int, criterion: Criterion) -> bool:
    if criterion.value is None:
        return False
    return criterion.operator.compare(actual, criterion.value)


def check_chain(activity: UserActivity, criterion: Criterion) -> bool:
    return any(c.chain_name.lower() == criterion.chain for c in activity.chains)


def check_chain_tx_count(activity: UserActivity, criterion: Criterion) -> bool:
    """First chain whose name contains the key; no such chain is not met."""
    chains = _chains_matching(activity, criterion.chain)
    if not chains:
        return False
    return _compare(chains[0].transaction_count, criterion)


def check_protocol(activity: UserActivity, criterion: Criterion) -> bool:
    return any(p.protocol.lower() == criterion.target for p in activity.protocols)


def check_nft_platform(activity: UserActivity, criterion: Criterion) -> bool:
    # NFT records carry no platform; platform use shows up as a protocol interaction
    return check_protocol(activity, criterion)


def check_bridge_to(activity: UserActivity, criterion: Criterion) -> bool:
    return any(criterion.target in b.bridge.lower() for b in activity.bridges)


def check_bridge_count(activity: UserActivity, criterion: Criterion) -> bool:
    return _compare(sum(b.count for b in activity.bridges), criterion)


def check_cross_chain_tx(activity: UserActivity, criterion: Criterion) -> bool:
    # Destination chains are unknown, so any bridge use counts as one
    return _compare(1 if activity.bridges else 0, criterion)


def check_chain_protocol_count(activity: UserActivity, criterion: Criterion) -> bool:
    chain_ids = {c.chain_id for c in _chains_matching(activity, criterion.chain)}
    count = sum(1 for p in activity.protocols if p.chain_id in chain_ids)
    return _compare(count, criterion)


def check_chain_balance(activity: UserActivity, criterion: Criterion) -> bool:
    return any(c.transaction_count > 0 for c in _chains_matching(activity, criterion.chain))


def check_protocol_mention(activity: UserActivity, criterion: Criterion) -> bool:
    return any(criterion.target in p.protocol.lower() for p in activity.protocols)


DEFAULT_HANDLERS: Dict[CriterionKind, CriterionHandler] = {
    CriterionKind.CHAIN: check_chain,
    CriterionKind.CHAIN_TX_COUNT: check_chain_tx_count,
    CriterionKind.PROTOCOL: check_protocol,
    CriterionKind.NFT_PLATFORM: check_nft_platform,
    CriterionKind.BRIDGE_TO: check_bridge_to,
    CriterionKind.BRIDGE_COUNT: check_bridge_count,
    CriterionKind.CROSS_CHAIN_TX: check_cross_chain_tx,
    CriterionKind.CHAIN_PROTOCOL_COUNT: check_chain_protocol_count,
    CriterionKind.CHAIN_BALANCE: check_chain_balance,
    CriterionKind.PROTOCOL_MENTION: check_protocol_mention,
}


# =============================================================
# DISPATCHER
# =============================================================


class CriteriaChecker:
    """
    Evaluates criteria against a UserActivity snapshot.

    Usage:
        checker = CriteriaChecker()
        checker.register(CriterionKind.CUSTOM, has_ens, name="ens")
        results = checker.check_all(project.criteria, activity)
    """

    def __init__(self, config: Optional[EligibilityConfig] = None):
        self._config = config or get_config()
        self._handlers: Dict[CriterionKind, CriterionHandler] = dict(DEFAULT_HANDLERS)
        self._custom_handlers: Dict[str, CriterionHandler] = {}

    def register(
        self,
        kind: CriterionKind,
        handler: CriterionHandler,
        name: Optional[str] = None,
    ) -> None:
        """
        Add or override the handler for a kind.

        Custom handlers are keyed by `name`, matched against
        `criterion.params["name"]`.
        """
        kind = CriterionKind(kind)
        if kind == CriterionKind.CUSTOM:
            if not name:
                raise ValueError("Custom criterion handlers require a name")
            self._custom_handlers[name] = handler
            logger.debug(f"Registered custom criterion handler '{name}'")
            return
        self._handlers[kind] = handler
        logger.debug(f"Registered criterion handler for '{kind.value}'")

    def supports(self, criterion: Criterion) -> bool:
        return self._resolve(criterion) is not None

    def _resolve(self, criterion: Criterion) -> Optional[CriterionHandler]:
        if criterion.kind == CriterionKind.CUSTOM:
            return self._custom_handlers.get(str(criterion.params.get("name", "")))
        return self._handlers.get(criterion.kind)

    def check(self, criterion: Criterion, activity: UserActivity) -> bool:
        """
        Whether a single criterion is met.

        Raises:
            UnsupportedCriterionError: only when `strict_kinds` is set
                and no handler exists
        """
        handler = self._resolve(criterion)
        if handler is None:
            name = criterion.params.get("name")
            if self._config.strict_kinds:
                raise UnsupportedCriterionError(criterion.kind.value, name)
            logger.warning(
                f"No handler for criterion kind '{criterion.kind.value}'"
                + (f" ({name})" if name else "")
                + "; treating as not met"
            )
            return False

        try:
            return bool(handler(activity, criterion))
        except Exception as e:
            logger.warning(f"Criterion '{criterion.description}' failed: {e}")
            return False

    def check_all(
        self,
        criteria: Iterable[Criterion],
        activity: UserActivity,
    ) -> List[CriterionResult]:
        return [
            CriterionResult(description=c.description, met=self.check(c, activity))
            for c in criteria
        ]
