from gear_gauge.models.gear import Gear
from gear_gauge.models.workout import Workout, gear_workouts
from gear_gauge.models.app_setting import AppSetting

__all__ = [
    "Gear",
    "Workout",
    "gear_workouts",
    "AppSetting",
]
