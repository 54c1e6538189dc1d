from app.db.mongo import get_database
from app.utils.ids import generate_consistent_uuid
from app.schemas.user import Profile
from app.utils.clock import utcnow
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self):
        self.collection_name = "profiles"

    async def get_collection(self):
        db = await get_database()
        return db[self.collection_name]

    async def get_by_id(self, internal_id: str) -> Optional[Dict[str, Any]]:
        collection = await self.get_collection()
        return await collection.find_one({"_id": internal_id})

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        collection = await self.get_collection()
        return await collection.find_one({"email": email})

    async def resolve_user_id(self, external_id: str, email: str) -> Optional[str]:
        """
        Map an external user to the internal id their records live under.

        The derived id is tried first, then the email, for accounts created
        before ids were derived consistently.
        """
        derived_id = generate_consistent_uuid(external_id)

        profile = await self.get_by_id(derived_id)
        if profile:
            logger.info(f"Resolved user {external_id} by derived id {derived_id}")
            return derived_id

        logger.warning(f"No profile for derived id {derived_id}, falling back to email lookup")
        profile = await self.get_by_email(email)
        if profile:
            logger.info(f"Resolved user {external_id} via email fallback to {profile['_id']}")
            return str(profile["_id"])

        return None

    async def sync_profile(
        self,
        external_id: str,
        email: str,
        full_name: Optional[str] = None,
        role: str = "student",
        auth_provider: str = "firebase"
    ) -> Profile:
        """Create or refresh the profile for a signed-in user."""
        collection = await self.get_collection()
        derived_id = generate_consistent_uuid(external_id)
        now = utcnow()

        existing = await collection.find_one({"_id": derived_id})
        if existing:
            if existing.get("email") != email or (full_name and existing.get("full_name") != full_name):
                await collection.update_one(
                    {"_id": derived_id},
                    {"$set": {"email": email, "full_name": full_name or existing.get("full_name"), "updated_at": now}}
                )
                logger.info(f"Updated profile {derived_id} with current email")
            return Profile(**await collection.find_one({"_id": derived_id}))

        # A profile created under an older id keeps its id
        legacy = await collection.find_one({"email": email})
        if legacy:
            await collection.update_one(
                {"_id": legacy["_id"]},
                {"$set": {"full_name": full_name or legacy.get("full_name"), "auth_provider": "both", "updated_at": now}}
            )
            logger.info(f"Linked user {external_id} to existing profile {legacy['_id']} by email")
            doc = await collection.find_one({"_id": legacy["_id"]})
            doc["_id"] = str(doc["_id"])
            return Profile(**doc)

        profile = {
            "_id": derived_id,
            "email": email,
            "full_name": full_name,
            "role": role,
            "auth_provider": auth_provider,
            "created_at": now,
            "updated_at": now
        }
        await collection.insert_one(profile)
        logger.info(f"Created profile {derived_id} for user {external_id}")
        return Profile(**profile)

profile_service = ProfileService()
