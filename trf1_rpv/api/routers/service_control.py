# trf1_rpv/api/routers/service_control.py
import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from trf1_rpv.api.deps import get_browser_session
from trf1_rpv.models_api.consulta import OperationResponse, StatusResponse
from trf1_rpv.services.browser_session import BrowserSessionManager

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/status", response_model=StatusResponse)
async def get_service_status(request: Request):
    session = getattr(request.app.state, 'browser_session', None)
    ready = session is not None and session.is_ready()
    return StatusResponse(
        pronto=ready,
        mensagem="Serviço pronto para consultas" if ready else "Serviço não inicializado",
    )

@router.post("/inicializar", response_model=OperationResponse)
async def initialize_service(session: BrowserSessionManager = Depends(get_browser_session)):
    logger.info("Received request to initialize the browser session.")
    try:
        await session.initialize()
    except Exception as e:
        logger.error(f"Failed to initialize browser session: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=OperationResponse(sucesso=False, mensagem=f"Erro ao inicializar: {e}").model_dump(),
        )
    return OperationResponse(sucesso=True, mensagem="Serviço inicializado com sucesso")

@router.post("/fechar", response_model=OperationResponse)
async def close_service(session: BrowserSessionManager = Depends(get_browser_session)):
    logger.info("Received request to close the browser session.")
    try:
        await session.close()
    except Exception as e:
        logger.error(f"Failed to close browser session: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=OperationResponse(sucesso=False, mensagem=f"Erro ao fechar: {e}").model_dump(),
        )
    return OperationResponse(sucesso=True, mensagem="Serviço fechado com sucesso")
