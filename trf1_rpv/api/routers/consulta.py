# trf1_rpv/api/routers/consulta.py
import logging
from typing import Optional
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from trf1_rpv.api.deps import get_query_executor
from trf1_rpv.models_api.consulta import ConsultaRequest, QueryResult

logger = logging.getLogger(__name__)
router = APIRouter()

MISSING_PARAMS_MESSAGE = "Parâmetros obrigatórios: secao, proc, uf"


async def _run_consulta(request: Request, consulta: ConsultaRequest) -> JSONResponse:
    if not consulta.is_complete():
        logger.warning(f"Rejected lookup with missing parameters: {consulta.model_dump()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"sucesso": False, "mensagem": MISSING_PARAMS_MESSAGE},
        )

    executor = get_query_executor(request)
    try:
        result = await executor.consultar_processo(consulta.secao, consulta.proc, consulta.uf)
    except Exception as e:
        logger.error(f"Unhandled error during lookup {consulta.model_dump()}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=QueryResult.failure(e).to_response(),
        )
    return JSONResponse(content=result.to_response())


async def _parse_json_body(request: Request) -> ConsultaRequest:
    # Anything that is not a JSON object with string fields counts as missing parameters
    try:
        body = await request.json()
    except ValueError:
        return ConsultaRequest()
    if not isinstance(body, dict):
        return ConsultaRequest()
    try:
        return ConsultaRequest(secao=body.get("secao"), proc=body.get("proc"), uf=body.get("uf"))
    except ValidationError:
        return ConsultaRequest()


@router.post("/consultar", summary="Consultar processo (JSON)")
async def consultar_processo_post(request: Request):
    return await _run_consulta(request, await _parse_json_body(request))


@router.get("/consultar", summary="Consultar processo (query string)")
async def consultar_processo_get(
    request: Request,
    secao: Optional[str] = None,
    proc: Optional[str] = None,
    uf: Optional[str] = None,
):
    return await _run_consulta(request, ConsultaRequest(secao=secao, proc=proc, uf=uf))
