# src/http_pipeline/core/classifier.py

from typing import Callable, Optional

# Последний "успешный" статус по HTTP (2xx включительно)
LAST_SUCCESSFUL_STATUS = 299


def is_error(status_code: int, ignore: Optional[Callable[[int], bool]] = None) -> bool:
    """
    Является ли статус ошибкой для данного запроса.

    Статусы <= 299 никогда не ошибка, независимо от предиката.
    Для остальных ошибка, если ignore(status) не вернул True.

    Examples:
        >>> is_error(404, lambda code: False)
        True
        >>> is_error(404, lambda code: code == 404)
        False
    """
    if status_code <= LAST_SUCCESSFUL_STATUS:
        return False
    if ignore is None:
        return True
    return not ignore(status_code)
