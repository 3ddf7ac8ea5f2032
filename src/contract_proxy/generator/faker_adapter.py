from __future__ import annotations

import random
from datetime import UTC
from typing import Any

from faker import Faker

from contract_proxy.models import FieldDescriptor, TypeCatalog, TypeDescriptor

# Nested catalog references are expanded this many levels; deeper ones become {}.
_MAX_DEPTH = 2
_LIST_LENGTH = (3, 10)
_FIELD_ARRAY_LENGTH = (1, 3)
_OPTIONAL_PRESENCE = 0.8


def _lower(name: str) -> str:
    return name.replace("_", "").lower()


class FakerMockGenerator:
    """Generate payloads that match a ``TypeDescriptor`` using Faker.

    Implements the ``MockGenerator`` protocol. Values are picked from the field
    kind first and refined by common field names (``email``, ``city``, ...).
    """

    def __init__(self, seed: int | None = None, locale: str | None = None) -> None:
        self._faker = Faker(locale)
        self._random = random.Random(seed)
        if seed is not None:
            self._faker.seed_instance(seed)

    def generate(self, descriptor: TypeDescriptor, catalog: TypeCatalog) -> dict[str, Any]:
        return self._object(descriptor, catalog, depth=1)

    def generate_many(
        self, descriptor: TypeDescriptor, catalog: TypeCatalog, count: int | None = None
    ) -> list[dict[str, Any]]:
        length = count if count is not None else self._random.randint(*_LIST_LENGTH)
        return [self.generate(descriptor, catalog) for _ in range(length)]

    def _object(self, descriptor: TypeDescriptor, catalog: TypeCatalog, depth: int) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for field in descriptor.fields:
            if field.optional and self._random.random() > _OPTIONAL_PRESENCE:
                continue
            if field.is_array:
                length = self._random.randint(*_FIELD_ARRAY_LENGTH)
                payload[field.name] = [self._value(field, catalog, depth) for _ in range(length)]
            else:
                payload[field.name] = self._value(field, catalog, depth)
        return payload

    def _value(self, field: FieldDescriptor, catalog: TypeCatalog, depth: int) -> Any:
        if field.type_ref:
            referenced = catalog.lookup(field.type_ref)
            if referenced is not None:
                if depth >= _MAX_DEPTH:
                    return {}
                return self._object(referenced, catalog, depth + 1)
        if field.enum:
            return self._random.choice(field.enum)
        if field.kind == "number":
            return self._number(field.name)
        if field.kind == "boolean":
            return self._faker.pybool()
        if field.kind == "object":
            return {}
        if field.format == "date-time":
            return self._faker.date_time(tzinfo=UTC).isoformat()
        return self._string(field.name)

    def _number(self, name: str) -> int | float:
        key = _lower(name)
        if key in ("price", "total", "amount", "cost", "balance") or key.endswith(("price", "amount")):
            return float(self._faker.pydecimal(left_digits=4, right_digits=2, positive=True))
        if key in ("latitude", "lat"):
            return float(self._faker.latitude())
        if key in ("longitude", "lng", "lon"):
            return float(self._faker.longitude())
        if key in ("age",):
            return self._faker.random_int(min=18, max=90)
        return self._faker.random_int(min=1, max=10_000)

    def _string(self, name: str) -> str:
        key = _lower(name)
        if key in ("id", "uuid") or name.endswith(("Id", "_id", "ID")):
            return str(self._faker.uuid4())
        if "email" in key:
            return self._faker.email()
        if key in ("firstname", "givenname"):
            return self._faker.first_name()
        if key in ("lastname", "surname", "familyname"):
            return self._faker.last_name()
        if key in ("name", "fullname", "username", "author"):
            return self._faker.user_name() if key == "username" else self._faker.name()
        if "phone" in key:
            return self._faker.phone_number()
        if key in ("url", "website", "homepage") or key.endswith("url"):
            return self._faker.url()
        if key in ("street", "address", "streetaddress"):
            return self._faker.street_address()
        if key == "city":
            return self._faker.city()
        if key == "country":
            return self._faker.country()
        if key in ("zip", "zipcode", "postcode", "postalcode"):
            return self._faker.postcode()
        if key in ("title", "subject"):
            return self._faker.sentence(nb_words=4).rstrip(".")
        if key in ("description", "body", "content", "summary", "bio"):
            return self._faker.paragraph()
        if name.endswith(("At", "_at")) or key.endswith("date") or key == "timestamp":
            return self._faker.date_time(tzinfo=UTC).isoformat()
        if key in ("color", "colour"):
            return self._faker.color_name()
        return self._faker.word()
