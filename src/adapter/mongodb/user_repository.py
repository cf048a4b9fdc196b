"""MongoDB implementation of UserRepository."""

from datetime import date, datetime, time, timezone
from logging import getLogger

from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError, NotFoundError
from domain.model.user import Gender, User
from port.user_repository import UserOrder

logger = getLogger(__name__)


def _date_to_datetime(value: date | None) -> datetime | None:
    """BSON has no date type; birthdays are stored as midnight UTC."""
    if value is None:
        return None
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _datetime_to_date(value: datetime | None) -> date | None:
    if value is None:
        return None
    return value.date()


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('login', 1)], 'idx_users_login', unique=True)
            create_index_safe(self.collection, [('created_on', 1)], 'idx_users_created_on')
            create_index_safe(self.collection, [('birthday', 1)], 'idx_users_birthday', sparse=True)
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            login=doc['login'],
            password_hash=doc['password_hash'],
            name=doc['name'],
            gender=Gender(doc.get('gender', Gender.UNKNOWN.value)),
            is_admin=doc.get('is_admin', False),
            created_on=doc['created_on'],
            created_by=doc['created_by'],
            birthday=_datetime_to_date(doc.get('birthday')),
            modified_on=doc.get('modified_on'),
            modified_by=doc.get('modified_by'),
            revoked_on=doc.get('revoked_on'),
            revoked_by=doc.get('revoked_by'),
        )

    def _to_document(self, user: User) -> dict:
        return {
            '_id': user.id,
            'login': user.login,
            'password_hash': user.password_hash,
            'name': user.name,
            'gender': user.gender.value,
            'is_admin': user.is_admin,
            'birthday': _date_to_datetime(user.birthday),
            'created_on': user.created_on,
            'created_by': user.created_by,
            'modified_on': user.modified_on,
            'modified_by': user.modified_by,
            'revoked_on': user.revoked_on,
            'revoked_by': user.revoked_by,
        }

    # ── write operations ─────────────────────────────────────

    def insert(self, user: User) -> None:
        """Insert a new user document. The unique login index arbitrates races."""
        try:
            self.collection.insert_one(self._to_document(user))
        except DuplicateKeyError:
            logger.warning("User insert rejected: login already exists", extra={"login": user.login})
            raise DuplicateError(user.login)
        except PyMongoError as e:
            logger.error("Failed to insert user", extra={"login": user.login, "error": str(e)})
            raise

        logger.debug("User inserted", extra={"userId": user.id, "login": user.login})

    def update(self, user: User) -> None:
        """Replace the whole user document in one atomic write."""
        try:
            result = self.collection.replace_one({'_id': user.id}, self._to_document(user))
        except DuplicateKeyError:
            logger.warning("User update rejected: login already exists", extra={"login": user.login})
            raise DuplicateError(user.login)
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user.id, "error": str(e)})
            raise

        if result.matched_count == 0:
            raise NotFoundError(f"User {user.id} not found")

    def delete(self, user: User) -> None:
        try:
            result = self.collection.delete_one({'_id': user.id})
        except PyMongoError as e:
            logger.error("Failed to delete user", extra={"userId": user.id, "error": str(e)})
            raise

        if result.deleted_count == 0:
            raise NotFoundError(f"User {user.id} not found")

    # ── read operations ──────────────────────────────────────

    def get_by_login(self, login: str) -> User | None:
        try:
            doc = self.collection.find_one({'login': login})
        except PyMongoError as e:
            logger.error("Failed to get user by login", extra={"login": login, "error": str(e)})
            raise
        return self._to_domain(doc) if doc else None

    def exists_by_login(self, login: str) -> bool:
        try:
            return self.collection.count_documents({'login': login}, limit=1) > 0
        except PyMongoError as e:
            logger.error("Failed to check login existence", extra={"login": login, "error": str(e)})
            raise

    def find_many(
        self,
        active_only: bool = False,
        born_on_or_before: date | None = None,
        order_by: UserOrder = 'created_on',
    ) -> list[User]:
        query: dict = {}
        if active_only:
            query['revoked_on'] = None
        if born_on_or_before is not None:
            # $lte never matches null, so users without a birthday drop out
            query['birthday'] = {'$lte': _date_to_datetime(born_on_or_before)}

        try:
            cursor = self.collection.find(query).sort(order_by, ASCENDING)
            return [self._to_domain(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error("Failed to list users", extra={"query": str(query), "error": str(e)})
            raise
