from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.formatting import mask_iban
from app.db.models import TrainerBanking
from app.db.repositories import BankingRepository
from app.exceptions import MissingBankingFieldsException
from app.schemas.banking import BankingDetails, BankingResponse, BankingUpdate

REQUIRED_FIELDS = ("payout_name", "payout_country", "payout_iban")


def to_banking_response(
    trainer_id: str, banking: Optional[TrainerBanking]
) -> BankingResponse:
    if banking is None:
        return BankingResponse(trainer_id=trainer_id)
    return BankingResponse(
        trainer_id=trainer_id,
        auto_payout=banking.auto_payout,
        has_banking=banking.has_banking,
        banking=BankingDetails(
            payout_name=banking.payout_name,
            payout_country=banking.payout_country,
            payout_iban_masked=mask_iban(banking.payout_iban),
            payout_bic=banking.payout_bic,
        ),
    )


class BankingService:
    def __init__(self, session: AsyncSession) -> None:
        self.banking_repo = BankingRepository(session)

    async def get_profile(self, trainer_id: str) -> BankingResponse:
        banking = await self.banking_repo.get(trainer_id)
        return to_banking_response(trainer_id, banking)

    async def update_profile(
        self, trainer_id: str, email: Optional[str], data: BankingUpdate
    ) -> BankingResponse:
        """Full update needs name, country and IBAN; partial accepts any subset."""
        fields = data.model_dump(exclude_unset=True, exclude={"partial"})
        if "payout_iban" in fields and fields["payout_iban"]:
            fields["payout_iban"] = "".join(fields["payout_iban"].split()).upper()
        if "payout_country" in fields and fields["payout_country"]:
            fields["payout_country"] = fields["payout_country"].upper()

        if not data.partial:
            missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
            if missing:
                raise MissingBankingFieldsException(missing)
            fields.setdefault("payout_bic", None)
            fields.setdefault("auto_payout", False)

        if fields.get("auto_payout") is None:
            fields.pop("auto_payout", None)
        if email:
            fields["email"] = email

        banking = await self.banking_repo.get_or_create_for_update(trainer_id, email)
        banking = await self.banking_repo.update(banking, **fields)
        return to_banking_response(trainer_id, banking)
