"""Administrator credentials used to create new databases.

The credentials live in a small file next to the tool:

    {"SYSDBA_USER": "SYSDBA", "SYSDBA_PASSWORD": "masterkey"}

JSON and YAML files are both accepted.
"""
from __future__ import annotations
import json
import yaml
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field


class AdminCredentials(BaseModel):
    """SYSDBA user and password."""
    model_config = ConfigDict(populate_by_name=True)

    user: str = Field(..., alias="SYSDBA_USER", min_length=1, description="Administrative user")
    password: str = Field(..., alias="SYSDBA_PASSWORD", min_length=1, description="Administrative password")

    @classmethod
    def from_file(cls, path: str | Path) -> AdminCredentials:
        """Load credentials from a JSON or YAML file.

        Args:
            path: Path to the credentials file

        Returns:
            Validated AdminCredentials instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is empty or a field is missing
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Credentials file not found: {config_path}")

        text = config_path.read_text(encoding="utf-8")
        if config_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)

        if not data:
            raise ValueError(f"Empty credentials file: {config_path}")

        try:
            return cls.model_validate(data)
        except Exception as e:
            raise ValueError(f"Invalid credentials in {config_path}: {e}") from e

    def log_redacted(self) -> dict:
        """Get credentials with the password redacted for logging."""
        return {"user": self.user, "password": "***"}
