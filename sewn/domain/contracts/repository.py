"""Contract repository - Database operations for contracts"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import Contract


class ContractRepository:
    """Repository for contract database operations"""

    @staticmethod
    def _with_parties(db: Session):
        return db.query(Contract).options(
            joinedload(Contract.project),
            joinedload(Contract.client),
            joinedload(Contract.expert),
        )

    @staticmethod
    def get_contract(db: Session, contract_id: str) -> Optional[Contract]:
        return (
            ContractRepository._with_parties(db)
            .filter(Contract.id == contract_id)
            .first()
        )

    @staticmethod
    def get_contracts_for_user(db: Session, user_id: str) -> list[Contract]:
        return (
            ContractRepository._with_parties(db)
            .filter(or_(Contract.client_id == user_id, Contract.expert_id == user_id))
            .order_by(Contract.created_at.desc())
            .all()
        )

    @staticmethod
    def get_expert_contracts(db: Session, expert_user_id: str) -> list[Contract]:
        return db.query(Contract).filter(Contract.expert_id == expert_user_id).all()
