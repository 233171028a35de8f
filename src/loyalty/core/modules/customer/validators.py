from loyalty.core.modules.customer.models import CustomerCreate, CustomerPatch
from loyalty.errors import ValidationError


def validate_name(name: str, message: str = "Please enter customer name") -> str:
    """Return the trimmed name, rejecting blank input."""
    name = name.strip()
    if not name:
        raise ValidationError(message)
    return name


def validate_points(points: int) -> int:
    if points < 0:
        raise ValidationError("Points cannot be negative")
    return points


def validate_new_customer(data: CustomerCreate) -> CustomerCreate:
    return CustomerCreate(name=validate_name(data.name), points=validate_points(data.points))


def validate_patch(patch: CustomerPatch) -> CustomerPatch:
    """Validate a partial update; at least one field must be set."""
    if patch.name is None and patch.points is None:
        raise ValidationError("Nothing to update")
    return CustomerPatch(
        name=validate_name(patch.name, "Please enter a name") if patch.name is not None else None,
        points=validate_points(patch.points) if patch.points is not None else None,
    )


def validate_points_adjustment(balance: int, delta: int) -> int:
    """Return the new balance after adding `delta` points.

    A redemption larger than the balance is rejected rather than clamped
    at zero, so an input mistake never looks like a partial redemption.
    """
    if isinstance(delta, bool) or not isinstance(delta, int):
        raise ValidationError("Points must be a whole number")
    if delta == 0:
        raise ValidationError("Points must be greater than 0")
    if delta < 0 and -delta > balance:
        raise ValidationError(f"Cannot redeem more than available points ({balance})")
    return balance + delta
