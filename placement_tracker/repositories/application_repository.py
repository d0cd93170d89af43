from typing import Dict, List, Optional, Tuple
import logging

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError

from placement_tracker.core.exceptions import ConflictError, PersistenceError
from placement_tracker.core.monitoring import monitor_db_operation
from placement_tracker.dependencies.error_code import ErrorCode
from placement_tracker.models.application import Application, ApplicationStatus, TargetKind, TargetRef
from placement_tracker.utils.time import now_utc

logger = logging.getLogger(__name__)


class ApplicationRepository:

    @staticmethod
    def _owner_target_query(owner_id: ObjectId, ref: TargetRef) -> Dict:
        return {
            "owner_id": owner_id,
            "target.kind": ref.kind.value,
            "target.id": ref.id,
        }

    @staticmethod
    @monitor_db_operation("application_get")
    async def get_for_owner(application_id: ObjectId, owner_id: ObjectId) -> Optional[Application]:
        try:
            return await Application.find_one({"_id": application_id, "owner_id": owner_id})
        except PyMongoError as e:
            logger.error(f"Error getting application {application_id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)

    @staticmethod
    @monitor_db_operation("application_find_by_target")
    async def find_by_target(owner_id: ObjectId, ref: TargetRef) -> Optional[Application]:
        try:
            return await Application.find_one(ApplicationRepository._owner_target_query(owner_id, ref))
        except PyMongoError as e:
            logger.error(f"Error looking up application for {ref.kind.value} {ref.id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)

    @staticmethod
    @monitor_db_operation("application_create")
    async def create(application: Application) -> Application:
        """Insert a new application; the unique owner/target index turns a lost race into a conflict."""
        try:
            await application.insert()
        except DuplicateKeyError as e:
            logger.warning(
                f"Duplicate application for owner {application.owner_id} "
                f"on {application.target.kind.value} {application.target.id}: {e}"
            )
            raise ConflictError(
                f"Already applied for this {application.target.kind.value}",
                ErrorCode.RESOURCE_ALREADY_EXISTS,
            )
        except PyMongoError as e:
            logger.error(f"Error creating application: {e}", exc_info=True)
            raise PersistenceError(original_error=e)

        logger.info(f"Application created: {application.id} ({application.status.value})")
        return application

    @staticmethod
    @monitor_db_operation("application_save")
    async def save(application: Application) -> Application:
        application.updated_at = now_utc()
        try:
            await application.save()
        except PyMongoError as e:
            logger.error(f"Error saving application {application.id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)
        return application

    @staticmethod
    @monitor_db_operation("application_set_fields")
    async def set_fields(application_id: ObjectId, fields: Dict) -> None:
        try:
            await Application.find_one({"_id": application_id}).update(
                {"$set": {**fields, "updated_at": now_utc()}}
            )
        except PyMongoError as e:
            logger.error(f"Error updating application {application_id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)

    @staticmethod
    @monitor_db_operation("application_delete")
    async def delete(application: Application) -> None:
        try:
            await application.delete()
        except PyMongoError as e:
            logger.error(f"Error deleting application {application.id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)
        logger.info(f"Application removed: {application.id}")

    @staticmethod
    @monitor_db_operation("application_list")
    async def list_for_owner(
        owner_id: ObjectId,
        status: Optional[ApplicationStatus] = None,
        kind: Optional[TargetKind] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Application], int]:
        query = {"owner_id": owner_id}
        if status:
            query["status"] = ApplicationStatus(status).value
        if kind:
            query["target.kind"] = TargetKind(kind).value

        try:
            cursor = Application.find(query)
            total = await cursor.count()
            applications = await cursor.sort([("applied_date", -1)]) \
                                       .skip(skip) \
                                       .limit(limit) \
                                       .to_list()
        except PyMongoError as e:
            logger.error(f"Error listing applications for owner {owner_id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)
        return applications, total

    @staticmethod
    @monitor_db_operation("application_list_by_kind")
    async def list_by_kind(owner_id: ObjectId, kind: TargetKind) -> List[Application]:
        try:
            return await Application.find(
                {"owner_id": owner_id, "target.kind": TargetKind(kind).value}
            ).sort([("applied_date", -1)]).to_list()
        except PyMongoError as e:
            logger.error(f"Error listing {kind} applications for owner {owner_id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)

    @staticmethod
    @monitor_db_operation("application_list_for_drives")
    async def list_for_drives(drive_id: Optional[ObjectId] = None) -> List[Application]:
        query = {"target.kind": TargetKind.DRIVE.value}
        if drive_id:
            query["target.id"] = drive_id
        try:
            return await Application.find(query).to_list()
        except PyMongoError as e:
            logger.error(f"Error listing drive applications: {e}", exc_info=True)
            raise PersistenceError(original_error=e)

    @staticmethod
    @monitor_db_operation("application_status_counts")
    async def count_by_status(owner_id: ObjectId) -> Dict[str, int]:
        pipeline = [
            {"$match": {"owner_id": owner_id}},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
        ]
        try:
            results = await Application.aggregate(pipeline).to_list()
        except PyMongoError as e:
            logger.error(f"Error counting applications for owner {owner_id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)
        return {row["_id"]: row["count"] for row in results}
