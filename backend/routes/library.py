"""Library routes — supported peripheral kinds."""

from fastapi import APIRouter, HTTPException

from backend.models import PeripheralInfo, PeripheralListResponse
from codegen.peripherals import get_peripheral, list_peripherals

router = APIRouter()


@router.get("/peripherals", response_model=PeripheralListResponse)
async def list_peripheral_kinds():
    """List the peripheral kinds the generator understands, in struct order."""
    peripherals = [PeripheralInfo(**p) for p in list_peripherals()]
    return PeripheralListResponse(peripherals=peripherals, total=len(peripherals))


@router.get("/peripherals/{kind}", response_model=PeripheralInfo)
async def get_peripheral_kind(kind: str):
    """Get one peripheral kind."""
    try:
        definition = get_peripheral(kind)
    except ValueError:
        raise HTTPException(status_code=404, detail="Peripheral kind not found")

    return PeripheralInfo(
        kind=definition.kind.value,
        description=definition.description,
        document_keys=list(definition.document_keys),
        phases=[p.value for p in definition.phases()],
    )
