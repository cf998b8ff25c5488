from fastapi import APIRouter, Depends

from gymtracker.deps.auth import get_controller
from gymtracker.services.controller import WorkoutController

router = APIRouter(prefix="/store", tags=["store"])

@router.get("/status")
def store_status(controller: WorkoutController = Depends(get_controller)):
    with controller.lock:
        store = controller.store
        return {"unsaved": store.unsaved, "routines": len(store.routines), "sessions": len(store.history)}

@router.post("/sync")
def sync_store(controller: WorkoutController = Depends(get_controller)):
    # retries the wholesale write after an earlier failure
    with controller.lock:
        return {"saved": controller.store.save(), "unsaved": controller.store.unsaved}
