from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from chronoplan.schemas.timetable import TimetableOut


class FitnessWeights(BaseModel):
    utilization: float = Field(default=0.3, ge=0.0, le=1.0)
    balance: float = Field(default=0.3, ge=0.0, le=1.0)
    preference: float = Field(default=0.2, ge=0.0, le=1.0)
    penalty: float = Field(default=0.2, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_not_all_zero(self) -> "FitnessWeights":
        if self.utilization + self.balance + self.preference + self.penalty <= 0:
            raise ValueError("At least one fitness weight must be positive")
        return self


class GenerationSettings(BaseModel):
    population_size: int = Field(default=50, ge=1, le=2000)
    max_generations: int = Field(default=100, ge=1, le=5000)
    mutation_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    crossover_rate: float = Field(default=0.8, ge=0.0, le=1.0)
    convergence_threshold: float = Field(default=0.95, ge=0.0, le=1.0)
    fitness_weights: FitnessWeights = Field(default_factory=FitnessWeights)
    elite_fraction: float = Field(default=0.2, ge=0.0, le=1.0)
    tournament_size: int = Field(default=3, ge=1, le=50)
    stagnation_limit: int = Field(default=20, ge=1, le=1000)
    repair_attempts: int = Field(default=100, ge=0, le=10_000)
    random_seed: int | None = Field(default=None, ge=0, le=2_000_000_000)

    @property
    def elite_count(self) -> int:
        return max(1, int(self.population_size * self.elite_fraction))


class GenerateTimetableRequest(BaseModel):
    academic_year: str = Field(min_length=1, max_length=20)
    semester: int = Field(ge=1, le=8)
    department: str = Field(min_length=1, max_length=200)
    generated_by: str | None = Field(default=None, max_length=36)
    settings_override: GenerationSettings | None = None

    @field_validator("academic_year", "department")
    @classmethod
    def strip_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Value cannot be blank")
        return stripped


class TimetableMetrics(BaseModel):
    classroom_utilization: float = Field(ge=0.0, le=100.0)
    faculty_workload_balance: float = Field(ge=0.0, le=100.0)
    conflict_count: int = Field(ge=0)
    preference_satisfaction: float = Field(ge=0.0, le=100.0)


class GenerateTimetableResponse(BaseModel):
    timetable: TimetableOut
    fitness: float
    generations: int
    termination: Literal["converged", "exhausted"]
    metrics: TimetableMetrics
    settings_used: GenerationSettings
    runtime_ms: int
    message: str = "Timetable generated successfully"
