class AdjustmentError(Exception):
    pass


class AdjustmentPlayerNotFoundError(AdjustmentError):
    pass


class AdjustmentInvalidError(AdjustmentError):
    pass


class AdjustmentIdempotencyConflictError(AdjustmentError):
    pass
