from __future__ import annotations


class TransactionImportError(Exception):
    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)
        self.line_number = line_number


class UnsupportedExchangeError(TransactionImportError):
    def __init__(self, exchange: str, *, supported: tuple[str, ...] = ()) -> None:
        message = f"Exchange not yet supported: {exchange!r}"
        if supported:
            message += f" (supported: {', '.join(supported)})"
        super().__init__(message)
        self.exchange = exchange


class UnknownActionError(TransactionImportError):
    def __init__(self, raw_action: str, *, exchange: str, line_number: int | None = None) -> None:
        super().__init__(f"Unknown {exchange} action {raw_action!r}", line_number=line_number)
        self.raw_action = raw_action
        self.exchange = exchange


class TimeParseError(TransactionImportError):
    def __init__(self, raw_value: str, *, line_number: int | None = None) -> None:
        super().__init__(f"Cannot parse timestamp {raw_value!r}", line_number=line_number)
        self.raw_value = raw_value


class NumericParseError(TransactionImportError):
    def __init__(self, raw_value: str, *, column: str, line_number: int | None = None) -> None:
        super().__init__(f"Cannot parse {column} value {raw_value!r}", line_number=line_number)
        self.raw_value = raw_value
        self.column = column


class MalformedRowError(TransactionImportError):
    pass
