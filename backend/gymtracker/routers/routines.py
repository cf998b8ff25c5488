from fastapi import APIRouter, Depends, Query, Request, status

from gymtracker.deps.auth import get_controller
from gymtracker.schemas.routine import Routine
from gymtracker.services.controller import WorkoutController
from gymtracker.views import routine_list_view

router = APIRouter(prefix="/routines", tags=["routines"])

@router.get("")
def list_routines(request: Request, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        return routine_list_view(controller.store.routines, request.app.state.locale)

@router.get("/{routine_id}", response_model=Routine)
def get_routine(routine_id: str, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        return controller.routine(routine_id)

@router.delete("/{routine_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_routine(
    routine_id: str,
    confirm: bool = Query(False),
    controller: WorkoutController = Depends(get_controller),
):
    with controller.lock:
        controller.delete_routine(routine_id, confirm=confirm)
