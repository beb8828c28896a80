"""Generation routes — custom hardware C++ header as JSON or file download."""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import ValidationError

from backend.models import (
    GenerateHardwareFileRequest,
    GenerateHardwareRequest,
    GenerateHardwareResponse,
    HardwareDescription,
)
from codegen.document import generation_notes, parse_description, peripheral_counts
from codegen.hardware import generate_hardware_source

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_UPLOAD_BYTES = 1024 * 1024  # 1MB


def _generate(request: GenerateHardwareRequest) -> tuple[dict, str]:
    description = request.hardware.to_document()
    try:
        source = generate_hardware_source(description, struct_name=request.struct_name)
    except Exception as e:
        logger.error(f"Hardware generation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Hardware source generation failed")
    return description, source


def _respond(request: GenerateHardwareRequest) -> GenerateHardwareResponse:
    description, source = _generate(request)
    return GenerateHardwareResponse(
        source=source,
        peripheral_counts=peripheral_counts(description),
        notes=generation_notes(description),
    )


@router.post("/generate-hardware", response_model=GenerateHardwareResponse)
async def generate_hardware(request: GenerateHardwareRequest):
    """Generate the custom hardware header for a hardware description."""
    return _respond(request)


@router.post("/generate-hardware/file")
async def generate_hardware_file(request: GenerateHardwareFileRequest):
    """Generate the custom hardware header as a downloadable file."""
    _, source = _generate(request)
    return Response(
        content=source,
        media_type="text/x-c++hdr",
        headers={"Content-Disposition": f"attachment; filename={request.filename}"},
    )


@router.post("/generate-hardware/upload", response_model=GenerateHardwareResponse)
async def generate_hardware_upload(file: UploadFile = File(...)):
    """Generate the custom hardware header from an uploaded description file.

    The file is the JSON hardware description itself, at most 1MB.
    """
    if not file.filename or not file.filename.lower().endswith(".json"):
        raise HTTPException(status_code=400, detail="Only JSON files are accepted.")

    chunks = []
    total_size = 0
    while True:
        chunk = await file.read(8192)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=413, detail="File too large. Maximum 1MB.")
        chunks.append(chunk)

    try:
        description = parse_description(b"".join(chunks).decode("utf-8"))
        hardware = HardwareDescription.model_validate(description)
    except ValidationError as e:
        # Same status as a schema violation in a JSON request body
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    except ValueError as e:
        logger.info(f"Rejected hardware description upload: {e}")
        raise HTTPException(status_code=400, detail="Invalid hardware description. Expected a JSON object.")

    return _respond(GenerateHardwareRequest(hardware=hardware))
