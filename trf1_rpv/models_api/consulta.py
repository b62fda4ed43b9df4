# trf1_rpv/models_api/consulta.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

QUERY_ERROR_MESSAGE = "Erro durante a consulta: {error}"

class ConsultaRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    # Optional at the schema level so missing fields get the API's own 400, not a 422
    secao: Optional[str] = None
    proc: Optional[str] = None
    uf: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.secao and self.proc and self.uf)

class QueryResult(BaseModel):
    """Outcome of one lookup. Serialized with the Portuguese wire names."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(..., alias="sucesso")
    message: str = Field(..., alias="mensagem")
    has_rpv: Optional[bool] = Field(None, alias="temRPV")
    matched_keyword: Optional[str] = Field(None, alias="detalhes")

    @classmethod
    def failure(cls, error: Exception) -> "QueryResult":
        return cls(success=False, message=QUERY_ERROR_MESSAGE.format(error=error))

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)

class OperationResponse(BaseModel):
    sucesso: bool
    mensagem: str

class StatusResponse(BaseModel):
    pronto: bool
    mensagem: str

class HealthResponse(BaseModel):
    status: str
    timestamp: str
