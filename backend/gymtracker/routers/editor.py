from fastapi import APIRouter, Body, Depends, status

from gymtracker.deps.auth import get_controller
from gymtracker.schemas.routine import ExerciseRowIn, ExerciseRowPatch, Routine, RoutineNameIn
from gymtracker.services.controller import WorkoutController
from gymtracker.views import editor_view

router = APIRouter(prefix="/editor", tags=["editor"])

@router.get("")
def get_editor(controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        return editor_view(controller.editor)

@router.post("", status_code=status.HTTP_201_CREATED)
def new_routine(controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.new_routine()
        return editor_view(controller.editor)

@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def cancel_editing(controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.editor.close()

@router.put("/name")
def set_name(payload: RoutineNameIn, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.editor.set_name(payload.name)
        return editor_view(controller.editor)

@router.post("/exercises", status_code=status.HTTP_201_CREATED)
def add_exercise(
    payload: ExerciseRowIn | None = Body(None),
    controller: WorkoutController = Depends(get_controller),
):
    with controller.lock:
        controller.editor.add_exercise(payload.model_dump() if payload else None)
        return editor_view(controller.editor)

@router.patch("/exercises/{index}")
def update_exercise(
    index: int,
    payload: ExerciseRowPatch,
    controller: WorkoutController = Depends(get_controller),
):
    with controller.lock:
        controller.editor.update_exercise(index, **payload.model_dump())
        return editor_view(controller.editor)

@router.delete("/exercises/{index}")
def remove_exercise(index: int, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.editor.remove_exercise(index)
        return editor_view(controller.editor)

@router.post("/save", response_model=Routine)
def save_routine(controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        return controller.save_routine()

# declared last so /editor/save and /editor/name are not taken for a routine id
@router.post("/{routine_id}")
def edit_routine(routine_id: str, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.edit_routine(routine_id)
        return editor_view(controller.editor)
