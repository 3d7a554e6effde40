from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile

from expense_tracker.core.models import EXPENSE, INCOME, TransactionKind
from expense_tracker.credentials import authenticate, create_user
from expense_tracker.dashboard import compute_dashboard
from expense_tracker.database import add_transaction, delete_transaction, list_transactions
from expense_tracker.errors import ValidationError
from expense_tracker.outputs.excel_output import XLSX_MIME_TYPE, export_report
from expense_tracker.tokens import issue_token
from expense_tracker.uploads import save_image
from webapp.schemas import ExpenseRequest, IncomeRequest, LoginRequest, RegisterRequest
from webapp.security import AuthContext, get_config, require_user

_REQUEST_MODELS = {INCOME.name: IncomeRequest, EXPENSE.name: ExpenseRequest}


def _session_payload(user, config: Dict[str, object]) -> dict:
    token = issue_token(user.id, config["jwt_secret"], config["token_ttl_hours"])
    return {"user": user.to_dict(), "token": token}


auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", status_code=201)
def register(body: RegisterRequest, config: Dict[str, object] = Depends(get_config)):
    user = create_user(
        config["db_path"],
        body.full_name,
        body.email,
        body.password,
        body.profile_image_url,
        rounds=config["bcrypt_rounds"],
    )
    return _session_payload(user, config)


@auth_router.post("/login")
def login(body: LoginRequest, config: Dict[str, object] = Depends(get_config)):
    user = authenticate(config["db_path"], body.email, body.password)
    return _session_payload(user, config)


@auth_router.get("/getUser")
def get_user(ctx: AuthContext = Depends(require_user)):
    return ctx.user.to_dict(with_timestamps=True)


@auth_router.post("/upload-image")
def upload_image(
    request: Request,
    image: Optional[UploadFile] = File(None),
    ctx: AuthContext = Depends(require_user),
    config: Dict[str, object] = Depends(get_config),
):
    if image is None:
        raise ValidationError("No file uploaded")
    stored = save_image(config["upload_dir"], image.filename, image.content_type, image.file.read())
    return {"imageUrl": str(request.url_for("uploads", path=stored))}


dashboard_router = APIRouter(tags=["dashboard"])


@dashboard_router.get("/dashboard")
def dashboard(ctx: AuthContext = Depends(require_user), config: Dict[str, object] = Depends(get_config)):
    db_path = config["db_path"]
    summary = compute_dashboard(
        ctx.user_id,
        list_transactions(db_path, INCOME, ctx.user_id),
        list_transactions(db_path, EXPENSE, ctx.user_id),
    )
    return summary.to_dict()


def build_transaction_router(kind: TransactionKind) -> APIRouter:
    """Routes for one transaction stream; income and expense mirror each other."""
    router = APIRouter(prefix=f"/{kind.name}", tags=[kind.name])
    request_model = _REQUEST_MODELS[kind.name]

    @router.post("/add", status_code=201)
    def add(
        body: request_model,
        ctx: AuthContext = Depends(require_user),
        config: Dict[str, object] = Depends(get_config),
    ):
        tx = add_transaction(
            config["db_path"], kind, ctx.user_id, body.label, body.amount, body.date, body.icon
        )
        return {"message": f"{kind.title} added successfully", kind.name: tx.to_dict()}

    def list_all(ctx: AuthContext = Depends(require_user), config: Dict[str, object] = Depends(get_config)):
        txs = list_transactions(config["db_path"], kind, ctx.user_id)
        return {kind.plural: [tx.to_dict() for tx in txs]}

    router.add_api_route("/get", list_all, methods=["GET"])
    router.add_api_route("/all", list_all, methods=["GET"], name=f"list_all_{kind.name}_alias")

    @router.get("/download-excel")
    def download_excel(ctx: AuthContext = Depends(require_user), config: Dict[str, object] = Depends(get_config)):
        txs = list_transactions(config["db_path"], kind, ctx.user_id)
        content = export_report(txs, kind)
        return Response(
            content=content,
            media_type=XLSX_MIME_TYPE,
            headers={"Content-Disposition": f"attachment; filename={kind.report_filename}"},
        )

    @router.delete("/{transaction_id}")
    def delete(
        transaction_id: int,
        ctx: AuthContext = Depends(require_user),
        config: Dict[str, object] = Depends(get_config),
    ):
        delete_transaction(config["db_path"], kind, transaction_id, ctx.user_id)
        return {"message": f"{kind.title} deleted successfully"}

    return router
