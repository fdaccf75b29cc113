import datetime as dt

from fastapi import APIRouter
from fastapi.responses import Response

from src.api.deps import SessionsDep
from src.services.report_service import build_csv_report

router = APIRouter()


@router.get("/csv")
def read_csv_report(sessions: SessionsDep) -> Response:
    """Player totals and settlements as a CSV file."""
    today = dt.datetime.now(dt.UTC).date().isoformat()
    return Response(
        content=build_csv_report(sessions),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="pokernow_report_{today}.csv"'
        },
    )
