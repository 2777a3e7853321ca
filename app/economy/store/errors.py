class StoreError(Exception):
    pass


class ProductAlreadyPurchasedError(StoreError):
    pass


class StorePlayerNotFoundError(StoreError):
    pass


class ProductNotFoundError(StoreError):
    pass


class ProductUnavailableError(StoreError):
    pass


class ProductOutOfStockError(StoreError):
    pass


class InsufficientCoinsError(StoreError):
    pass


class ProductValidationError(StoreError):
    pass
