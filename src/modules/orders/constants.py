"""Order domain constants.

Order status is a free-form label; ``PENDING`` is only the value an
order gets when the caller does not supply one.
"""

DEFAULT_ORDER_STATUS = "PENDING"

STATUS_MAX_LENGTH = 50
