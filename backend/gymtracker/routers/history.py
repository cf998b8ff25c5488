from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status

from gymtracker.deps.auth import get_controller
from gymtracker.messages import message
from gymtracker.schemas.workout import ImportResult, ShiftMonth
from gymtracker.services.controller import WorkoutController
from gymtracker.views import (
    calendar_view,
    history_browser_view,
    history_list_view,
    session_detail_view,
)

router = APIRouter(prefix="/history", tags=["history"])

EXPORT_FILENAME = "gym_tracker_history.json"

@router.get("")
def list_history(request: Request, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.history_browser.show_list()
        return history_list_view(controller.store.history, controller.tz, request.app.state.locale)

@router.get("/browser")
def get_browser(request: Request, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        return history_browser_view(controller, request.app.state.locale)

@router.get("/export")
def export_history(controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        content = controller.export_history()
    return Response(
        content=content.encode("utf-8"),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )

@router.post("/import", response_model=ImportResult)
def import_history(
    request: Request,
    file: UploadFile = File(...),
    controller: WorkoutController = Depends(get_controller),
):
    content = file.file.read()
    with controller.lock:
        merged = controller.import_history(content)
    locale = request.app.state.locale
    if merged:
        return ImportResult(merged=merged, message=message("import_merged", locale, count=merged))
    return ImportResult(merged=0, message=message("import_nothing_new", locale))

@router.get("/calendar")
def get_calendar(controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.history_browser.show_calendar()
        return calendar_view(controller.store.history, controller.history_browser, controller.tz)

@router.post("/calendar/shift")
def shift_calendar(payload: ShiftMonth, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.history_browser.show_calendar()
        controller.history_browser.shift(payload.delta)
        return calendar_view(controller.store.history, controller.history_browser, controller.tz)

@router.post("/calendar/days/{day}")
def click_day(day: int, request: Request, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.click_day(day)
        return history_browser_view(controller, request.app.state.locale)

@router.get("/sessions/{start_time}")
def get_session(start_time: str, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        session = controller.session(start_time)
        controller.history_browser.open_detail(session.start_time)
        return session_detail_view(session)

@router.delete("/sessions/{start_time}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(start_time: str, controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        controller.delete_session(start_time)
