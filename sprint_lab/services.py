"""
Tracker service - campaign operations on top of the data store.

Every operation returns a ServiceResult. Validation problems and store
failures are reported as `success=False` with a user-facing (pt-BR) message;
nothing here raises for an expected failure.
"""

import logging
import os
from dataclasses import replace
from typing import List, Optional

from .campaign import DashboardSummary, summarize_logs
from .leaderboard import compute_leaderboard
from .models import (
    LOG_TYPES,
    ROLE_ADMIN,
    ROLE_DISTRIBUTOR,
    DailyLog,
    OfficialSale,
    ServiceResult,
    TeamMember,
    User,
)
from .store import DataStore, StoreError
from .utils import (
    digits_only,
    hash_password,
    now_millis,
    sanitize_input,
    today_br,
    validate_name,
    validate_password,
    validate_phone_number,
    verify_password,
)

logger = logging.getLogger(__name__)

# Self-report limits per submission
MAX_PAIRS_PER_LOG = 100
MAX_PROSPECTS_PER_LOG = 1000
MAX_ACTIVATIONS_PER_LOG = 100
MAX_SALE_QUANTITY = 1000

ADMIN_USER_ID = "admin-master"
ADMIN_USER_NAME = "Administrador All-In"

SERVER_ERROR_MESSAGE = "Erro de comunicação com o servidor. Tente novamente."
INVALID_CREDENTIALS_MESSAGE = "Credenciais inválidas"


class TrackerService:
    """Campaign operations (registration, logs, official sales, rankings)"""

    def __init__(
        self,
        store: DataStore,
        admin_identifier: Optional[str] = None,
        admin_password: Optional[str] = None,
    ):
        """
        Args:
            store: Data store (usually the FallbackStore chain)
            admin_identifier: Login of the built-in admin (env ADMIN_IDENTIFIER)
            admin_password: Password of the built-in admin (env ADMIN_PASSWORD)
                The built-in admin is disabled unless both are set.
        """
        self.store = store
        self.admin_identifier = admin_identifier if admin_identifier is not None else os.getenv("ADMIN_IDENTIFIER", "")
        self.admin_password = admin_password if admin_password is not None else os.getenv("ADMIN_PASSWORD", "")

    # --- AUTHENTICATION ---

    async def register_user(self, name: str, whatsapp: str, password: str) -> ServiceResult[User]:
        clean_name = sanitize_input(name)
        clean_phone = digits_only(sanitize_input(whatsapp))

        if not validate_phone_number(clean_phone):
            return ServiceResult.fail("Número de telefone inválido")

        name_ok, name_error = validate_name(clean_name)
        if not name_ok:
            return ServiceResult.fail(name_error)

        password_ok, password_error = validate_password(password)
        if not password_ok:
            return ServiceResult.fail(password_error)

        try:
            if await self.store.get_user_credentials(clean_phone) is not None:
                return ServiceResult.fail("Usuário já existe")

            user = await self.store.create_user(
                name=clean_name,
                whatsapp=clean_phone,
                password_hash=hash_password(password),
                role=ROLE_DISTRIBUTOR,
            )
        except StoreError as e:
            logger.error(f"Registration failed for {clean_phone}: {e}")
            return ServiceResult.fail(f"Erro ao registrar usuário: {e}")

        logger.info(f"Registered distributor {user.id} ({clean_phone})")
        return ServiceResult.ok(user)

    def _builtin_admin(self, identifier: str, password: str) -> Optional[User]:
        if not self.admin_identifier or not self.admin_password:
            return None
        if identifier == self.admin_identifier and password == self.admin_password:
            return User(
                id=ADMIN_USER_ID,
                name=ADMIN_USER_NAME,
                whatsapp="00000000000",
                role=ROLE_ADMIN,
            )
        return None

    async def authenticate_user(self, identifier: str, password: str) -> ServiceResult[User]:
        clean_identifier = sanitize_input(identifier)
        if not clean_identifier:
            return ServiceResult.fail("Identificador inválido")
        if not password:
            return ServiceResult.fail("Senha inválida")

        admin = self._builtin_admin(clean_identifier, password)
        if admin is not None:
            logger.info("Built-in admin logged in")
            return ServiceResult.ok(admin)

        # E-mail identifiers only exist for the built-in admin
        if "@" in clean_identifier:
            return ServiceResult.fail(INVALID_CREDENTIALS_MESSAGE)

        try:
            found = await self.store.get_user_credentials(digits_only(clean_identifier))
        except StoreError as e:
            logger.error(f"Authentication lookup failed: {e}")
            return ServiceResult.fail(SERVER_ERROR_MESSAGE)

        if found is None:
            return ServiceResult.fail(INVALID_CREDENTIALS_MESSAGE)

        user, password_hash = found
        if not verify_password(password, password_hash):
            return ServiceResult.fail(INVALID_CREDENTIALS_MESSAGE)

        return ServiceResult.ok(user)

    # --- LOGS (SELF REPORTING) ---

    async def get_logs(self, user_id: str) -> ServiceResult[List[DailyLog]]:
        try:
            logs = await self.store.list_logs(user_id)
        except StoreError as e:
            logger.error(f"Failed to fetch logs for {user_id}: {e}")
            return ServiceResult.fail(f"Erro ao buscar registros: {e}")
        return ServiceResult.ok(logs)

    @staticmethod
    def validate_log(log: DailyLog) -> Optional[str]:
        """Returns an error message, or None if the log is acceptable"""
        if not log.user_id:
            return "ID do usuário inválido"
        if not 0 <= log.pairs_sold <= MAX_PAIRS_PER_LOG:
            return "Número de pares vendidos inválido"
        if not 0 <= log.prospects_contacted <= MAX_PROSPECTS_PER_LOG:
            return "Número de prospects inválido"
        if not 0 <= log.activations <= MAX_ACTIVATIONS_PER_LOG:
            return "Número de ativações inválido"
        if not log.date:
            return "Data inválida"
        if log.type not in LOG_TYPES:
            return "Tipo de registro inválido"
        return None

    async def save_log(self, log: DailyLog) -> ServiceResult[DailyLog]:
        if not log.date:
            log = replace(log, date=today_br())

        error = self.validate_log(log)
        if error:
            return ServiceResult.fail(error)

        try:
            saved = await self.store.insert_log(log)
        except StoreError as e:
            logger.error(f"Failed to save log for {log.user_id}: {e}")
            return ServiceResult.fail(f"Erro ao salvar registro: {e}")

        logger.info(f"Saved daily log {saved.id} for {saved.user_id}: {saved.pairs_sold} pairs")
        return ServiceResult.ok(saved)

    # --- OFFICIAL SALES (ADMIN ONLY) ---

    async def add_official_sale(self, distributor_id: str, quantity: int) -> ServiceResult[OfficialSale]:
        if not distributor_id:
            return ServiceResult.fail("ID do distribuidor inválido")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or not 0 < quantity <= MAX_SALE_QUANTITY:
            return ServiceResult.fail("Quantidade inválida")

        try:
            sale = await self.store.insert_official_sale(
                distributor_id=distributor_id,
                quantity=quantity,
                date=today_br(),
                timestamp=now_millis(),
            )
        except StoreError as e:
            logger.error(f"Failed to record official sale for {distributor_id}: {e}")
            return ServiceResult.fail("Erro ao registrar venda")

        logger.info(f"Official sale {sale.id}: {quantity} pairs for {distributor_id}")
        return ServiceResult.ok(sale)

    # --- LEADERBOARD / TEAM STATS ---

    async def get_leaderboard(self, current_user_id: Optional[str] = None) -> ServiceResult[List[TeamMember]]:
        try:
            users = await self.store.list_users(role=ROLE_DISTRIBUTOR)
            sales = await self.store.list_official_sales()
            logs = await self.store.list_logs()
        except StoreError as e:
            logger.error(f"Failed to load leaderboard data: {e}")
            return ServiceResult.fail("Erro ao buscar dados do ranking")

        return ServiceResult.ok(compute_leaderboard(users, sales, logs, current_user_id))

    async def get_dashboard(self, user_id: str) -> ServiceResult[DashboardSummary]:
        result = await self.get_logs(user_id)
        if not result.success:
            return ServiceResult.fail(result.error)
        return ServiceResult.ok(summarize_logs(result.data))

    async def list_users(self) -> ServiceResult[List[User]]:
        try:
            users = await self.store.list_users()
        except StoreError as e:
            logger.error(f"Failed to list users: {e}")
            return ServiceResult.fail(f"Erro ao buscar usuários: {e}")
        return ServiceResult.ok(users)
