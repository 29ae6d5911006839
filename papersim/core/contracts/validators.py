"""
JSON Schema Contract Validators

Модуль для валидации сохранённого состояния согласно формальным JSON Schema
контрактам. Использует библиотеку jsonschema для проверки соответствия данных
схемам перед тем, как движок примет их из хранилища.

Схемы:
- paper_state.json (ключ paper.state.v3)
- watchlist.json (ключ watchlist.v1)
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы поставляются вместе с пакетом (papersim/core/contracts/schema/).
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Any] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Any:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'paper_state')

        Returns:
            Загруженная схема

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-валидацию
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Any) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)


class PaperStateValidator(ContractValidator):
    """Валидатор для paper_state контракта"""

    def __init__(self):
        super().__init__("paper_state")


class WatchlistValidator(ContractValidator):
    """Валидатор для watchlist контракта"""

    def __init__(self):
        super().__init__("watchlist")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_paper_state(data: Any) -> None:
    """
    Валидация сохранённого paper-счёта.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    PaperStateValidator().validate(data)


def validate_watchlist(data: Any) -> None:
    """
    Валидация сохранённого watchlist.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    WatchlistValidator().validate(data)
