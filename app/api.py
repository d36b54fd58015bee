"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import (
    GridRowModel,
    HeatmapRequest,
    HeatmapResponse,
    LegendTickModel,
    PaletteStepModel,
    PaletteSummary,
    ScaleDefinitionModel,
    ScaleModel,
    ValueRangeModel,
)
from models.palettes import BUILTIN_PALETTES, default_palette_for
from models.records import PaletteStep
from services.assembler import HeatmapAssembler, HeatmapResult
from services.controller import require_accumulator_max, resolve_sensor_mode
from services.errors import HeatmapError, IndeterminateRangeError
from settings import get_settings

router = APIRouter()


def get_assembler() -> HeatmapAssembler:
    return HeatmapAssembler(tz=get_settings().tzinfo())


def _step_model(step: PaletteStep) -> PaletteStepModel:
    return PaletteStepModel(color=step.color, value=step.value, legend=step.legend)


def _to_response(result: HeatmapResult) -> HeatmapResponse:
    return HeatmapResponse(
        rows=[
            GridRowModel(
                date_label=row.date_label,
                native_date=row.native_date,
                values=list(row.values),
                colors=result.cell_colors(row),
            )
            for row in result.rows
        ],
        scale=ScaleModel(
            name=result.scale.name,
            type=result.scale.type,
            css=result.scale.css_stops,
            steps=[_step_model(step) for step in result.scale.steps],
        ),
        legend=[
            LegendTickModel(position=tick.position_percent, value=tick.display_value)
            for tick in result.legend
        ],
        range=ValueRangeModel(min=result.value_range.min, max=result.value_range.max),
    )


@router.post(
    "/heatmap",
    response_model=HeatmapResponse,
    summary="Assemble a heatmap grid, color scale and legend from hourly statistics.",
)
async def assemble_heatmap(
    request: HeatmapRequest,
    assembler: HeatmapAssembler = Depends(get_assembler),
) -> HeatmapResponse:
    settings = get_settings()
    if isinstance(request.scale, ScaleDefinitionModel):
        scale = request.scale.to_definition()
    else:
        scale = request.scale or default_palette_for(request.device_class)

    try:
        mode = resolve_sensor_mode(request.sensor_kind)
        require_accumulator_max(mode, request.data.max)
        result = assembler.assemble(
            [sample.to_sample() for sample in request.samples],
            mode,
            scale,
            (request.data.min, request.data.max),
            unit_system=request.unit_system or settings.unit_system,
            locale=request.locale or settings.locale,
        )
    except IndeterminateRangeError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except HeatmapError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return _to_response(result)


@router.get(
    "/palettes",
    response_model=List[PaletteSummary],
    summary="List the built-in named palettes.",
)
async def list_palettes() -> List[PaletteSummary]:
    return [
        PaletteSummary(
            key=key,
            name=definition.name,
            type=definition.type,
            unit=definition.unit,
            steps=[_step_model(step) for step in definition.steps],
        )
        for key, definition in BUILTIN_PALETTES.items()
    ]


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
