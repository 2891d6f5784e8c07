from .history import History
from .view_transform import ViewTransform
from .interaction import InteractionController, PointerEvent, Hit
from .plan_editor import PlanEditor
from .models import Room, WallFeature, RoomEdit, FeatureEdit
from . import geometry_utils, plan_io, config
