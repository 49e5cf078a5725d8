"""
JSON Schema контракты issuance engine

Каждый контракт — файл schema/<name>.json (Draft 2020-12), поставляемый
вместе с пакетом. Набор контрактов закрыт и перечислен в SCHEMA_NAMES:

- purchase_request: внешний запрос buy (amount и deposited_value — строки)
- sale_request: внешний запрос sell
- ledger_event: запись event_log (Bought / Sold)
- ledger_config: параметры LedgerConfig.from_dict

Валидаторы строятся один раз на имя контракта и переиспользуются.
При нарушении наружу уходит одна, наиболее релевантная ошибка
(jsonschema.exceptions.best_match).
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple

import jsonschema
from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

SCHEMA_NAMES: Tuple[str, ...] = (
    "purchase_request",
    "sale_request",
    "ledger_event",
    "ledger_config",
)


class SchemaLoader:
    """
    Загрузчик схем и кэш построенных по ним валидаторов.

    По умолчанию читает каталог schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}
        self._validators: Dict[str, Draft202012Validator] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка схемы по имени (без расширения) с meta-validation.

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema

    def validator_for(self, schema_name: str) -> Draft202012Validator:
        """Валидатор для схемы; строится при первом обращении."""
        validator = self._validators.get(schema_name)
        if validator is None:
            validator = Draft202012Validator(self.load_schema(schema_name))
            self._validators[schema_name] = validator
        return validator


@lru_cache(maxsize=None)
def _packaged_schemas() -> SchemaLoader:
    return SchemaLoader()


def validator_for(schema_name: str) -> Draft202012Validator:
    """
    Кэшированный валидатор контракта из SCHEMA_NAMES.

    Raises:
        ValueError: Если контракт с таким именем не поставляется
    """
    if schema_name not in SCHEMA_NAMES:
        raise ValueError(
            f"Unknown contract {schema_name!r}, expected one of: {', '.join(SCHEMA_NAMES)}"
        )
    return _packaged_schemas().validator_for(schema_name)


def validate_contract(schema_name: str, data: Dict[str, Any]) -> None:
    """
    Проверка data против контракта schema_name.

    Raises:
        ValueError: Если контракт неизвестен
        jsonschema.ValidationError: Наиболее релевантное нарушение
    """
    error = best_match(validator_for(schema_name).iter_errors(data))
    if error is not None:
        raise error


def validate_purchase_request(data: Dict[str, Any]) -> None:
    validate_contract("purchase_request", data)


def validate_sale_request(data: Dict[str, Any]) -> None:
    validate_contract("sale_request", data)


def validate_ledger_event(data: Dict[str, Any]) -> None:
    validate_contract("ledger_event", data)


def validate_ledger_config(data: Dict[str, Any]) -> None:
    validate_contract("ledger_config", data)
