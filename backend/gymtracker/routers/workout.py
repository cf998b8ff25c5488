from fastapi import APIRouter, Depends, Request

from gymtracker.deps.auth import get_controller
from gymtracker.schemas.workout import AdjustRest, Confirm, LogSetIn, StartWorkout
from gymtracker.services.controller import WorkoutController
from gymtracker.views import workout_view

router = APIRouter(prefix="/workout", tags=["workout"])

@router.get("")
def get_workout(request: Request, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        return workout_view(controller, request.app.state.locale)

@router.post("/start")
def start_workout(
    payload: StartWorkout,
    request: Request,
    controller: WorkoutController = Depends(get_controller),
):
    with controller.lock:
        controller.start_workout(payload.routine_id)
        return workout_view(controller, request.app.state.locale)

@router.post("/sets")
def log_set(
    payload: LogSetIn,
    request: Request,
    controller: WorkoutController = Depends(get_controller),
):
    with controller.lock:
        controller.log_set(payload.weight, payload.reps)
        return workout_view(controller, request.app.state.locale)

@router.post("/rest/adjust")
def adjust_rest(
    payload: AdjustRest,
    request: Request,
    controller: WorkoutController = Depends(get_controller),
):
    with controller.lock:
        controller.adjust_rest(payload.delta)
        return workout_view(controller, request.app.state.locale)

@router.post("/rest/skip")
def skip_rest(request: Request, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.skip_rest()
        return workout_view(controller, request.app.state.locale)

@router.post("/abort")
def abort_workout(
    payload: Confirm,
    request: Request,
    controller: WorkoutController = Depends(get_controller),
):
    with controller.lock:
        controller.abort_workout(confirm=payload.confirm)
        return workout_view(controller, request.app.state.locale)
