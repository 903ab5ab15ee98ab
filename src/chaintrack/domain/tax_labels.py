"""Tax label mapping for the Awaken CSV ``Tag`` column.

Only unambiguous intents get a label. Staking, reward claims, lending
operations, approvals, generic contract calls and contract creation map to
an empty tag.
"""

from types import MappingProxyType

from chaintrack.domain.intent import IntentKind, kind_value

TAX_LABELS_VERSION = "1"

ADD_LIQUIDITY = "add_liquidity"
REMOVE_LIQUIDITY = "remove_liquidity"
SWAP = "swap"
RECEIVE = "receive"
PAYMENT = "payment"

TAX_LABELS = (ADD_LIQUIDITY, REMOVE_LIQUIDITY, SWAP, RECEIVE, PAYMENT)

_INTENT_TO_LABEL = MappingProxyType(
    {
        **{kind.value: SWAP for kind in IntentKind if kind.value.startswith("swap")},
        IntentKind.ADD_LIQUIDITY.value: ADD_LIQUIDITY,
        IntentKind.REMOVE_LIQUIDITY.value: REMOVE_LIQUIDITY,
        IntentKind.TOKEN_TRANSFER.value: PAYMENT,
        IntentKind.TOKEN_TRANSFER_FROM.value: PAYMENT,
    }
)


def map_to_tax_label(
    intent_kind: str | IntentKind, is_native_transfer: bool = False, is_sender: bool = True
) -> str:
    """Map an intent kind to a tax label.

    Args:
        intent_kind: Intent kind from the classifier
        is_native_transfer: Native transfers skip the table entirely
        is_sender: Whether the user sent the native transfer

    Returns:
        A label from ``TAX_LABELS``, or "" when the intent is ambiguous
    """
    if is_native_transfer:
        return PAYMENT if is_sender else RECEIVE

    return _INTENT_TO_LABEL.get(kind_value(intent_kind), "")
