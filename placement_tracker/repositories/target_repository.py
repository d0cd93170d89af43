from typing import Dict, Iterable, List, Optional, Tuple, Type, Union
import logging

from beanie import Document
from bson import ObjectId
from pymongo.errors import PyMongoError

from placement_tracker.core.exceptions import PersistenceError
from placement_tracker.core.monitoring import monitor_db_operation
from placement_tracker.models.application import TargetKind, TargetRef
from placement_tracker.models.company_drive import CompanyDrive
from placement_tracker.models.job_role import JobRole
from placement_tracker.utils.helpers import build_search_query

logger = logging.getLogger(__name__)

Target = Union[CompanyDrive, JobRole]


class TargetRepository:
    """Read access to the role/drive catalog plus the applicant counter."""

    TARGET_MODELS: Dict[TargetKind, Type[Document]] = {
        TargetKind.ROLE: JobRole,
        TargetKind.DRIVE: CompanyDrive,
    }

    @staticmethod
    def model_for(kind: TargetKind) -> Type[Document]:
        return TargetRepository.TARGET_MODELS[TargetKind(kind)]

    @staticmethod
    @monitor_db_operation("target_get")
    async def get_target(ref: TargetRef) -> Optional[Target]:
        model = TargetRepository.model_for(ref.kind)
        try:
            return await model.get(ref.id)
        except PyMongoError as e:
            logger.error(f"Error getting {ref.kind.value} {ref.id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)

    @staticmethod
    @monitor_db_operation("target_get_many")
    async def get_targets(kind: TargetKind, ids: Iterable[ObjectId]) -> Dict[ObjectId, Target]:
        ids = list(set(ids))
        if not ids:
            return {}
        model = TargetRepository.model_for(kind)
        try:
            targets = await model.find({"_id": {"$in": ids}}).to_list()
        except PyMongoError as e:
            logger.error(f"Error getting {kind.value} batch: {e}", exc_info=True)
            raise PersistenceError(original_error=e)
        return {target.id: target for target in targets}

    @staticmethod
    @monitor_db_operation("target_increment_applicants")
    async def increment_applicants(ref: TargetRef) -> bool:
        """Atomically bump the applicant counter of a role or drive."""
        model = TargetRepository.model_for(ref.kind)
        try:
            result = await model.find_one({"_id": ref.id}).update({"$inc": {"applicants": 1}})
        except PyMongoError as e:
            logger.error(f"Error incrementing applicants for {ref.kind.value} {ref.id}: {e}", exc_info=True)
            raise PersistenceError(original_error=e)

        if not result.matched_count:
            logger.warning(f"Applicant counter not updated, {ref.kind.value} {ref.id} no longer exists")
            return False
        return True

    @staticmethod
    @monitor_db_operation("drive_list")
    async def list_drives(
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[CompanyDrive], int]:
        query = {"is_active": True}
        search_query = build_search_query(search, ["company", "role", "requirements"])
        if search_query:
            query.update(search_query)

        try:
            cursor = CompanyDrive.find(query)
            total = await cursor.count()
            drives = await cursor.sort([("featured", -1), ("deadline", 1)]) \
                                 .skip(skip) \
                                 .limit(limit) \
                                 .to_list()
        except PyMongoError as e:
            logger.error(f"Error listing company drives: {e}", exc_info=True)
            raise PersistenceError(original_error=e)
        return drives, total

    @staticmethod
    @monitor_db_operation("role_list")
    async def list_roles(
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[JobRole], int]:
        query = {"is_active": True}
        search_query = build_search_query(search, ["title", "company", "skills"])
        if search_query:
            query.update(search_query)

        try:
            cursor = JobRole.find(query)
            total = await cursor.count()
            roles = await cursor.sort([("featured", -1), ("created_at", -1)]) \
                                .skip(skip) \
                                .limit(limit) \
                                .to_list()
        except PyMongoError as e:
            logger.error(f"Error listing job roles: {e}", exc_info=True)
            raise PersistenceError(original_error=e)
        return roles, total


def stage_list(target: Optional[Target]) -> List[str]:
    """Ordered stage names of a target; roles have none."""
    if isinstance(target, CompanyDrive):
        return list(target.process or [])
    return []
