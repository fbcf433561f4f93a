# contoso_pets/models.py
from decimal import Decimal
from typing import Annotated, Union

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

MIN_PRICE = Decimal("0.01")
MAX_PRICE = Decimal("79228162514264337593543950335")


def _float_to_decimal(value):
    # JSON bodies arrive as floats; 12.99 should mean Decimal("12.99")
    if isinstance(value, float):
        return Decimal(repr(value))
    return value


def _check_price_fits_json(price: Decimal) -> Decimal:
    # fractional prices go out as JSON floats, so they must survive that trip
    if price != price.to_integral_value() and Decimal(repr(float(price))) != price:
        raise ValueError("price has more precision than a JSON number can carry")
    return price


def _price_as_number(price: Decimal) -> Union[int, float]:
    # whole prices are written as integers so large values stay exact
    if price == price.to_integral_value():
        return int(price)
    return float(price)


Name = Annotated[str, Field(min_length=1)]
Price = Annotated[
    Decimal,
    Field(ge=MIN_PRICE, le=MAX_PRICE),
    BeforeValidator(_float_to_decimal),
    AfterValidator(_check_price_fits_json),
    PlainSerializer(_price_as_number, when_used="json"),
]


class ProductIn(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: Name
    price: Price


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    name: Name
    price: Price
