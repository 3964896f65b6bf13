from .effects import EffectHandler, MutationResult
from .planner_api import PlannerAPI

__all__ = ['EffectHandler', 'MutationResult', 'PlannerAPI']
