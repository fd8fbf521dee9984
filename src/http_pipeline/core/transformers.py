"""
Трансформеры тела запроса и ответа.

JSON реализация построена на pydantic: TypeAdapter умеет сериализовать и
валидировать dataclasses, pydantic модели, TypedDict и контейнеры.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Optional, Union

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .exceptions import RequestEncodeError, ResponseDecodeError
from .headers import Headers

JSON_CONTENT_TYPE = "application/json"


class RequestTransformer(ABC):
    """Сериализация тела запроса в форму для записи в соединение."""

    @abstractmethod
    def transform(self, payload: Any, headers: Headers) -> Union[bytes, str]:
        """
        Args:
            payload: Тело запроса
            headers: Эффективные заголовки запроса (для content negotiation)

        Returns:
            bytes или str
        """
        pass

    def content_type(self) -> Optional[str]:
        """Content-Type, который выставляется, если заголовок не задан."""
        return None


class ResponseTransformer(ABC):
    """Декодирование тела ответа в запрошенный тип."""

    @abstractmethod
    def transform(self, data: bytes, target_type: Any) -> Any:
        """
        Raises:
            ResponseDecodeError: Тело не декодируется в target_type
        """
        pass


@lru_cache(maxsize=256)
def _adapter(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


class JsonRequestTransformer(RequestTransformer):
    """
    JSON сериализация через pydantic.

    bytes и str передаются как есть - считаем, что тело уже сериализовано.
    """

    def transform(self, payload: Any, headers: Headers) -> Union[bytes, str]:
        if isinstance(payload, (bytes, str)):
            return payload
        try:
            return _adapter(Any).dump_json(payload)
        except PydanticSerializationError as e:
            raise RequestEncodeError(f"Cannot serialize request body: {e}") from e

    def content_type(self) -> Optional[str]:
        return JSON_CONTENT_TYPE


class JsonResponseTransformer(ResponseTransformer):
    """JSON десериализация с валидацией в target_type через pydantic."""

    def transform(self, data: bytes, target_type: Any) -> Any:
        try:
            return _adapter(target_type).validate_json(data)
        except ValidationError as e:
            raise ResponseDecodeError(
                f"Cannot decode response body: {e.error_count()} validation error(s)",
                target_type=target_type,
            ) from e
        except TypeError as e:
            # TypeAdapter не смог построить схему для типа
            raise ResponseDecodeError(f"Unsupported response type: {e}", target_type=target_type) from e
