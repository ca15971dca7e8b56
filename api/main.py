from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DashboardDataResponse, ErrorResponse, HealthResponse
from core.data import DataSourceNotFoundError, load_dashboard_data, prepare_context
from core.filters import normalize_date_range
from core.metrics_summary import compute_dashboard


app = FastAPI(title="Summary Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

TABLE_COLUMNS = ["customer", "region", "product", "totalBookings", "totalBillings", "backlog", "bookToBillRatio"]


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                type(pd.NaT): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _dashboard_payload(start_date: Optional[str], end_date: Optional[str]) -> dict:
    data_ctx = load_dashboard_data()
    ctx = prepare_context(normalize_date_range(start_date, end_date), data_ctx)
    return compute_dashboard(ctx)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"status": "ok"}


@app.get(
    "/api/data",
    response_model=DashboardDataResponse,
    responses={500: {"model": ErrorResponse}},
)
def dashboard_data(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
):
    try:
        return _json(_dashboard_payload(start_date, end_date))
    except DataSourceNotFoundError as exc:
        logger.error("dashboard_data: %s", exc)
        return _error(exc)
    except Exception as exc:
        logger.exception("dashboard_data failed")
        return _error(exc)


@app.get("/api/export/table", responses={500: {"model": ErrorResponse}})
def export_table(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
):
    try:
        payload = _dashboard_payload(start_date, end_date)
    except DataSourceNotFoundError as exc:
        logger.error("export_table: %s", exc)
        return _error(exc)
    except Exception as exc:
        logger.exception("export_table failed")
        return _error(exc)

    export_df = pd.DataFrame(payload["tableRows"], columns=TABLE_COLUMNS)
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=summary_table.csv"},
    )
