"""
Homeplan: Interactive Floor Plan Editor

Draw, move and resize rectangular rooms on a pannable, zoomable grid, add
doors and windows to their walls, and undo/redo every edit. The plan is
saved to and loaded from outputs/home-plan.json.

Controls:
    Left-drag room      Move room (select tool)
    Left-drag corner    Resize the selected room
    Left-drag empty     Pan (select tool) / draw a room (draw tool)
    Middle-drag         Pan with any tool
    Scroll              Zoom centred on cursor
    v / n               Select tool / draw tool
    ctrl+z / ctrl+y     Undo / redo
    delete              Delete selected room
    k                   Lock or unlock selected room
    d / w               Add door / window to selected room
    ctrl+s / ctrl+o     Save / load plan
    e                   Export room schedule CSV
    f / 0               Fit plan / reset zoom
"""

# fmt: off
# autopep8: off

import logging

from homeplan import config, plan_io
from homeplan.plan_canvas import PlanCanvas
from homeplan.plan_editor import PlanEditor
from homeplan.plan_io import PlanFormatError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)

if __name__ == "__main__":
    rooms = None
    if config.PLAN_PATH.exists():
        try:
            rooms = plan_io.load_plan(config.PLAN_PATH)
        except PlanFormatError as exc:
            print(f"Warning: {exc}. Starting from the default plan.")
    editor = PlanEditor(rooms)

    canvas = PlanCanvas(editor, plan_path=config.PLAN_PATH)
    canvas.launch()
