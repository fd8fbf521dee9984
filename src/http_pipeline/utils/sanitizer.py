# src/http_pipeline/utils/sanitizer.py
"""
Маскирование чувствительных данных в логах.

Пайплайн логирует URL, заголовки и поля ошибок; значения токенов,
паролей и ключей не должны попадать в логи.
"""

import re
from typing import Any, Dict, Mapping

DEFAULT_MASK = "***REDACTED***"

# Чувствительные поля (case-insensitive, частичное совпадение)
SENSITIVE_KEYS = {
    'password', 'passwd', 'pwd',
    'token', 'access_token', 'refresh_token', 'jwt',
    'secret', 'client_secret',
    'api_key', 'apikey', 'private_key',
    'authorization', 'proxy-authorization', 'x-api-key',
    'cookie', 'set-cookie', 'session', 'csrf',
    'credentials', 'otp', 'cvv', 'card_number',
}

# Паттерны для значений внутри строк
SENSITIVE_PATTERNS = [
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    (re.compile(r'(api[_-]?key[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    (re.compile(r'(token[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    (re.compile(r'(password[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
]

_URL_USERINFO = re.compile(r'://([^:/@]+):([^@/]+)@')


def mask_sensitive_data(data: Any, mask: str = DEFAULT_MASK) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Args:
        data: dict, list, tuple, str или любое другое значение
        mask: Строка-заменитель

    Returns:
        Копия данных с замаскированными значениями

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "Accept": "*/*"})
        {'Authorization': '***REDACTED***', 'Accept': '*/*'}

        >>> mask_sensitive_data("https://api.example.com?api_key=abc&page=1")
        'https://api.example.com?api_key=***REDACTED***&page=1'
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        return _mask_string(data, mask)

    if isinstance(data, Mapping):
        return _mask_mapping(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    # Прочие объекты как есть
    return data


def _mask_mapping(data: Mapping[Any, Any], mask: str) -> Dict[Any, Any]:
    result = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            result[key] = mask
        else:
            result[key] = mask_sensitive_data(value, mask)
    return result


def _mask_string(text: str, mask: str) -> str:
    result = _URL_USERINFO.sub(rf'://\1:{mask}@', text)
    for pattern, replacement in SENSITIVE_PATTERNS:
        if mask != DEFAULT_MASK:
            replacement = replacement.replace(DEFAULT_MASK, mask)
        result = pattern.sub(replacement, result)
    return result


def is_sensitive_key(key: str) -> bool:
    """Ключ совпадает или содержит одно из SENSITIVE_KEYS."""
    key = key.lower()
    if key in SENSITIVE_KEYS:
        return True
    return any(sensitive in key for sensitive in SENSITIVE_KEYS)


def mask_headers(headers: Mapping[str, str], mask: str = DEFAULT_MASK) -> Dict[str, str]:
    """
    Маскирует значения чувствительных HTTP заголовков.

    Examples:
        >>> mask_headers({"Authorization": "Bearer t", "User-Agent": "app/1.0"})
        {'Authorization': '***REDACTED***', 'User-Agent': 'app/1.0'}
    """
    return _mask_mapping(headers, mask)


def add_sensitive_keys(*keys: str) -> None:
    """
    Добавить ключи, значения которых надо маскировать.

    Examples:
        >>> add_sensitive_keys('x-internal-signature')
    """
    for key in keys:
        SENSITIVE_KEYS.add(key.lower())


def remove_sensitive_keys(*keys: str) -> None:
    for key in keys:
        SENSITIVE_KEYS.discard(key.lower())
