"""
Cart error taxonomy and user-facing messages.

Every failure inside a cart operation ends up as exactly one notification.
The text shown to the user is looked up by message key so the same
operation always reports the same string.
"""

# Message keys
ADD_PRODUCT_FAILED = "add_product_failed"
REMOVE_PRODUCT_FAILED = "remove_product_failed"
UPDATE_AMOUNT_FAILED = "update_amount_failed"
OUT_OF_STOCK = "out_of_stock"

DEFAULT_LANGUAGE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        ADD_PRODUCT_FAILED: "Failed to add product",
        REMOVE_PRODUCT_FAILED: "Failed to remove product",
        UPDATE_AMOUNT_FAILED: "Failed to update product amount",
        OUT_OF_STOCK: "Requested quantity out of stock",
    },
    "pt": {
        ADD_PRODUCT_FAILED: "Erro na adição do produto",
        REMOVE_PRODUCT_FAILED: "Erro na remoção do produto",
        UPDATE_AMOUNT_FAILED: "Erro na alteração de quantidade do produto",
        OUT_OF_STOCK: "Quantidade solicitada fora de estoque",
    },
}


def get_message(key: str, lang: str = DEFAULT_LANGUAGE) -> str:
    """Return message text in the given language, falling back to English."""
    texts = MESSAGES.get((lang or DEFAULT_LANGUAGE).lower()[:2], MESSAGES[DEFAULT_LANGUAGE])
    return texts.get(key) or MESSAGES[DEFAULT_LANGUAGE].get(key, key)


class CartError(Exception):
    """Base class for failures that abort a cart operation."""

    message_key: str | None = None

    def __init__(self, detail: str = "", message_key: str | None = None):
        super().__init__(detail or self.__class__.__name__)
        if message_key:
            self.message_key = message_key


class ProductNotInCartError(CartError):
    """Operation referenced a product id absent from the cart."""


class OutOfStockError(CartError):
    """Requested quantity exceeds availability, or the stock record id mismatched."""

    message_key = OUT_OF_STOCK


class InvalidAmountError(CartError):
    """Requested quantity is not a positive integer."""

    message_key = UPDATE_AMOUNT_FAILED


class StockServiceError(CartError):
    """The catalog/stock API call failed or returned an unusable body.

    Carries no message key: each operation reports transport failures with
    its own message.
    """

    def __init__(self, detail: str = "", status_code: int | None = None):
        super().__init__(detail)
        self.status_code = status_code
