# src/nova_client/utils/sanitizer.py
"""
Утилита для маскирования чувствительных данных в логах.

Защищает токены (X-Auth-Token), пароли и секреты от попадания в логи.
"""

import re
from typing import Any, Dict


# Список чувствительных полей (case-insensitive, частичное совпадение)
SENSITIVE_KEYS = {
    'password', 'passwd', 'secret', 'secrets',
    'token', 'auth', 'authorization', 'credentials',
    'api_key', 'apikey', 'private_key',
    'cookie', 'session_id',
}

# Регулярные выражения для обнаружения sensitive данных в строках
SENSITIVE_PATTERNS = [
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(X-Auth-Token[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(token[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(password[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1***REDACTED***'),
]


def mask_sensitive_data(data: Any, mask: str = "***REDACTED***") -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Args:
        data: Данные для маскирования
        mask: Строка-заменитель

    Returns:
        Копия данных с замаскированными чувствительными полями

    Examples:
        >>> mask_sensitive_data({"X-Auth-Token": "abc", "Accept": "application/json"})
        {'X-Auth-Token': '***REDACTED***', 'Accept': 'application/json'}
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        result = data
        for pattern, replacement in SENSITIVE_PATTERNS:
            result = pattern.sub(replacement.replace('***REDACTED***', mask), result)
        return result

    if isinstance(data, dict):
        return _mask_dict(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    # Прочие объекты возвращаем как есть
    return data


def _mask_dict(data: Dict[Any, Any], mask: str) -> Dict[Any, Any]:
    result = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            result[key] = mask
        else:
            result[key] = mask_sensitive_data(value, mask)
    return result


def is_sensitive_key(key: str) -> bool:
    """
    Проверяет, является ли ключ чувствительным.

    Examples:
        >>> is_sensitive_key("X-Auth-Token")
        True
        >>> is_sensitive_key("resource_kind")
        False
    """
    key = key.lower().replace('-', '_')
    return any(sensitive in key for sensitive in SENSITIVE_KEYS)
