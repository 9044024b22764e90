"""FastAPI routes for pairing code allocation and lookup."""

from fastapi import APIRouter, HTTPException, Request

from controllers.session_controller import allocate_code, check_code
from models.event_models import AllocateCodeResponse, CheckCodeResponse

router = APIRouter(prefix="/api")


@router.post("/generate-pin", response_model=AllocateCodeResponse)
async def generate_pin_route(request: Request):
	try:
		return await allocate_code(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/check-pin/{code}", response_model=CheckCodeResponse)
async def check_pin_route(request: Request, code: str):
	try:
		return await check_code(request, code)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
