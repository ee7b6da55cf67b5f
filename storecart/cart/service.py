"""Cart state manager: stock-validated mutations mirrored to storage."""
import asyncio
import inspect
from typing import Callable, List, Optional, Set

from storecart import config
from storecart.errors import (
    ADD_PRODUCT_FAILED,
    OUT_OF_STOCK,
    REMOVE_PRODUCT_FAILED,
    UPDATE_AMOUNT_FAILED,
    CartError,
    InvalidAmountError,
    OutOfStockError,
    ProductNotInCartError,
    get_message,
)
from storecart.logging import get_logger, sanitize_id_for_logging
from storecart.services.notifications import LoggingNotifier, NotificationSink
from storecart.services.stock_client import StockClient

from .models import Cart, CartItem
from .storage import CartStorage, RedisCartStorage

logger = get_logger(__name__)

Subscriber = Callable[[Cart], None]


class CartManager:
    """
    Owns the current cart and the only way to change it.

    Features:
    - Every quantity increase is checked against live stock
    - Copy-on-write snapshots: ``cart`` is never modified in place
    - Every successful mutation is written to storage and pushed to subscribers
    - Failures never raise; each one produces exactly one notification

    The first unit of a product is added without a stock check; only
    increments beyond it are validated.

    Not safe for overlapping calls: await one mutation before issuing the next.
    """

    def __init__(
        self,
        stock_client: StockClient,
        storage: CartStorage,
        notifier: Optional[NotificationSink] = None,
        language: str = config.CART_LANGUAGE,
    ):
        self.stock_client = stock_client
        self.storage = storage
        self.notifier = notifier or LoggingNotifier()
        self.language = language
        self._cart = Cart()
        self._subscribers: List[Subscriber] = []
        self._pending_notifications: Set[asyncio.Task] = set()

    @classmethod
    async def create(
        cls,
        stock_client: StockClient,
        storage: CartStorage,
        notifier: Optional[NotificationSink] = None,
        language: str = config.CART_LANGUAGE,
    ) -> "CartManager":
        """Build a manager and restore the persisted cart."""
        manager = cls(stock_client, storage, notifier, language)
        await manager.load()
        return manager

    @property
    def cart(self) -> Cart:
        """Current cart snapshot."""
        return self._cart

    # ==================== State / storage ====================

    async def load(self) -> Cart:
        """
        Restore the cart from storage.

        A restored cart is trusted as-is; stock is only checked on the next
        mutation. Missing or unreadable data yields an empty cart.
        """
        try:
            raw = await self.storage.load()
        except Exception as e:
            logger.error(f"Failed to read stored cart: {e}")
            raw = None

        if not raw:
            self._cart = Cart()
            return self._cart

        try:
            self._cart = Cart.from_json(raw)
            logger.info(f"Restored cart with {len(self._cart)} item(s)")
        except Exception as e:
            # Bad JSON, wrong shape, overflowing numbers, nesting too deep
            logger.warning(f"Corrupted cart data, starting empty: {type(e).__name__}: {e}")
            self._cart = Cart()
        return self._cart

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Call ``callback(cart)`` after every successful mutation.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def _commit(self, cart: Cart) -> Cart:
        """Swap in the new snapshot, then mirror it to storage and subscribers."""
        self._cart = cart
        await self._persist(cart)
        for callback in list(self._subscribers):
            try:
                callback(cart)
            except Exception:
                logger.exception("Cart subscriber failed")
        return cart

    async def _persist(self, cart: Cart) -> None:
        # The in-memory cart stays authoritative when storage is down
        try:
            await self.storage.save(cart.to_json())
        except Exception as e:
            logger.error(f"Failed to save cart to storage: {e}")

    async def _notify(self, message_key: str) -> None:
        """Hand one message to the sink without waiting for async delivery."""
        message = get_message(message_key, self.language)
        try:
            result = self.notifier.notify_error(message)
        except Exception:
            logger.exception(f"Failed to deliver notification: {message}")
            return
        if inspect.isawaitable(result):
            task = asyncio.create_task(self._deliver(result, message))
            self._pending_notifications.add(task)
            task.add_done_callback(self._pending_notifications.discard)

    async def _deliver(self, delivery, message: str) -> None:
        try:
            await delivery
        except Exception:
            logger.exception(f"Failed to deliver notification: {message}")

    async def wait_notifications(self) -> None:
        """Wait for notifications still being delivered (shutdown, tests)."""
        if self._pending_notifications:
            await asyncio.gather(*list(self._pending_notifications))

    # ==================== Stock validation ====================

    async def _validate_stock(self, product_id: int, amount: int) -> None:
        """
        Check ``amount`` against current stock.

        Raises:
            OutOfStockError: stock is lower than ``amount`` or the record is for another id
            StockServiceError: the stock lookup itself failed
        """
        stock = await self.stock_client.get_stock(product_id)
        if stock.id != product_id or amount > stock.amount:
            raise OutOfStockError(
                f"requested {amount} of {product_id}, stock record {stock.id} has {stock.amount}"
            )

    async def has_stock(self, product_id: int, amount: int) -> bool:
        """Validate ``amount`` against stock, notifying the user when it is not available."""
        try:
            await self._validate_stock(product_id, amount)
        except OutOfStockError:
            await self._notify(OUT_OF_STOCK)
            return False
        return True

    # ==================== Mutations ====================

    async def add_product(self, product_id: int) -> Cart:
        """Add one unit of a product, creating the line item if needed."""
        log_id = sanitize_id_for_logging(product_id)
        try:
            item = self._cart.find(product_id)

            if item is not None:
                amount = item.amount + 1
                await self._validate_stock(product_id, amount)
                logger.info(f"Product {log_id} amount -> {amount}")
                return await self._commit(self._cart.with_amount(product_id, amount))

            product = await self.stock_client.get_product(product_id)
            logger.info(f"Product {log_id} added to cart")
            return await self._commit(self._cart.with_item(CartItem.from_product(product)))
        except CartError as e:
            logger.warning(f"Add product {log_id} rejected: {e}")
            await self._notify(e.message_key or ADD_PRODUCT_FAILED)
        except Exception:
            logger.exception(f"Failed to add product {log_id}")
            await self._notify(ADD_PRODUCT_FAILED)
        return self._cart

    async def remove_product(self, product_id: int) -> Cart:
        """Remove the line item for a product."""
        log_id = sanitize_id_for_logging(product_id)
        try:
            if product_id not in self._cart:
                raise ProductNotInCartError(f"product {product_id} is not in the cart")
            logger.info(f"Product {log_id} removed from cart")
            return await self._commit(self._cart.without(product_id))
        except CartError as e:
            logger.warning(f"Remove product {log_id} rejected: {e}")
        except Exception:
            logger.exception(f"Failed to remove product {log_id}")
        await self._notify(REMOVE_PRODUCT_FAILED)
        return self._cart

    async def update_product_amount(self, product_id: int, amount: int) -> Cart:
        """Set the quantity of a product already in the cart."""
        log_id = sanitize_id_for_logging(product_id)
        try:
            if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
                raise InvalidAmountError(f"amount must be a positive integer, got {amount!r}")
            if product_id not in self._cart:
                raise ProductNotInCartError(
                    f"product {product_id} is not in the cart",
                    message_key=UPDATE_AMOUNT_FAILED,
                )

            await self._validate_stock(product_id, amount)
            logger.info(f"Product {log_id} amount -> {amount}")
            return await self._commit(self._cart.with_amount(product_id, amount))
        except CartError as e:
            logger.warning(f"Update amount of {log_id} rejected: {e}")
            # Transport failures share the out-of-stock message here
            await self._notify(e.message_key or OUT_OF_STOCK)
        except Exception:
            logger.exception(f"Failed to update amount of {log_id}")
            await self._notify(OUT_OF_STOCK)
        return self._cart


# Default instance wired from environment configuration
_cart_manager: Optional[CartManager] = None
_cart_manager_lock = asyncio.Lock()


async def get_cart_manager() -> CartManager:
    """Get the default CartManager (Redis storage, HTTP stock client)."""
    global _cart_manager
    async with _cart_manager_lock:
        if _cart_manager is None:
            _cart_manager = await CartManager.create(
                stock_client=StockClient(),
                storage=RedisCartStorage(owner=config.CART_OWNER),
            )
    return _cart_manager


async def close_cart_manager() -> None:
    """Flush pending notifications and close the default manager's HTTP client."""
    global _cart_manager
    async with _cart_manager_lock:
        manager, _cart_manager = _cart_manager, None
    if manager is not None:
        await manager.wait_notifications()
        await manager.stock_client.close()
