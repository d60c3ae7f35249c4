# app/domain/errors.py


class StorefrontError(Exception):
    """
    Bazowy blad domeny sklepu.
    status_code to odpowiednik HTTP, handler w app.main renderuje {"error": message}.
    """

    status_code = 500
    default_message = "Wystąpił nieoczekiwany błąd"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(StorefrontError):
    status_code = 401
    default_message = "Wymagane uwierzytelnienie. Zaloguj się."


class InvalidInput(StorefrontError):
    status_code = 400
    default_message = "Nieprawidłowe dane wejściowe"


class InvalidShippingAddress(InvalidInput):
    default_message = "Uzupełnij wszystkie dane adresu dostawy"


class EmptyCart(StorefrontError):
    status_code = 400
    default_message = "Koszyk jest pusty"


class StockExceeded(StorefrontError):
    status_code = 400

    def __init__(self, product_name: str, stock_quantity: int, requested: int | None = None):
        self.product_name = product_name
        self.stock_quantity = stock_quantity
        self.requested = requested
        message = f"Brak wystarczającej ilości produktu: {product_name} (stan: {stock_quantity}"
        if requested is not None:
            message += f", zamówiono: {requested}"
        super().__init__(message + ")")


class ProductInactive(StorefrontError):
    status_code = 400

    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__(f"Produkt nie jest w sprzedaży: {product_name}")


class InvalidState(StorefrontError):
    status_code = 400
    default_message = "Nieprawidłowy status zamówienia dla tej operacji"


class AmountMismatch(StorefrontError):
    status_code = 400
    default_message = "Kwota płatności nie zgadza się z kwotą zamówienia"


class Forbidden(StorefrontError):
    status_code = 403
    default_message = "Brak dostępu"


class NotFound(StorefrontError):
    status_code = 404
    default_message = "Nie znaleziono"


class PaymentProcessorError(StorefrontError):
    status_code = 500
    default_message = "Potwierdzenie płatności nie powiodło się"


class PaymentResultUnreadable(PaymentProcessorError):
    """Operator odpowiedzial 2xx (platnosc przeszla), ale body nie jest JSON-em."""

    default_message = "Płatność potwierdzona, ale nie udało się odczytać odpowiedzi operatora"


class StoreError(StorefrontError):
    status_code = 500
    default_message = "Błąd bazy danych"


class ConfigurationError(StorefrontError):
    status_code = 500
    default_message = "Błędna konfiguracja serwera"
