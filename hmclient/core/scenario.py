from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .parameter import ParameterSet


class ScenarioDescriptor(BaseModel):
    """
    Startup configuration handed to the optimizer.

    The descriptor is the in-memory form of the scenario artifact written by
    [`hmclient/config/scenario_builder.py`](hmclient/config/scenario_builder.py:1).
    Output paths inside the artifact are relative to ``run_directory``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    application_name: str
    objectives: List[str]
    parameters: ParameterSet
    optimization_iterations: int = Field(default=20, ge=0)
    number_of_samples: int = Field(default=10, ge=1)
    output_folder: str = "outdata"
    run_directory: Path = Field(default_factory=Path.cwd)
    feasible_predictor: bool = False
    doe_type: str = "standard latin hypercube"
    model: str = "random_forest"

    @field_validator("application_name", "output_folder")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("objectives")
    @classmethod
    def _validate_objectives(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one objective is required")
        if any(not name or not name.strip() for name in value):
            raise ValueError("objective names must be non-empty")
        if len(set(value)) != len(value):
            raise ValueError(f"objective names must be unique: {value}")
        return value

    @model_validator(mode="after")
    def _validate_parameters(self) -> "ScenarioDescriptor":
        if len(self.parameters) == 0:
            raise ValueError("at least one input parameter is required")
        clashes = set(self.parameters.keys()) & set(self.objectives)
        if clashes:
            raise ValueError(f"objective names clash with parameter keys: {sorted(clashes)}")
        return self

    @property
    def output_dir(self) -> Path:
        return Path(self.run_directory) / self.output_folder

    @property
    def scenario_path(self) -> Path:
        return self.output_dir / f"{self.application_name}_scenario.json"

    @property
    def log_file(self) -> str:
        return f"{self.output_folder}/log_{self.application_name}.log"

    @property
    def output_data_file(self) -> str:
        return f"{self.output_folder}/{self.application_name}_output_data.csv"

    @property
    def output_pareto_file(self) -> str:
        return f"{self.output_folder}/{self.application_name}_output_pareto.csv"

    @property
    def output_image_pdf_file(self) -> str:
        return f"{self.output_folder}_{self.application_name}_output_image.pdf"
