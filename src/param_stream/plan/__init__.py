"""Named parameter layouts and their JSON/YAML configs."""

from .config import load_plan, plan_from_config, plan_to_config, save_plan
from .spec import DecodePlan, ParameterSpec

__all__ = ["DecodePlan", "ParameterSpec", "load_plan", "plan_from_config", "plan_to_config", "save_plan"]
