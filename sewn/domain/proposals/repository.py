"""Proposal repository - Database operations for proposals"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Proposal


class ProposalRepository:
    """Repository for proposal database operations"""

    @staticmethod
    def get_proposal(db: Session, proposal_id: str) -> Optional[Proposal]:
        return (
            db.query(Proposal)
            .options(joinedload(Proposal.project), joinedload(Proposal.expert))
            .filter(Proposal.id == proposal_id)
            .first()
        )

    @staticmethod
    def find_existing(db: Session, project_id: str, expert_id: str) -> Optional[Proposal]:
        return (
            db.query(Proposal)
            .filter(Proposal.project_id == project_id, Proposal.expert_id == expert_id)
            .first()
        )

    @staticmethod
    def get_proposals_by_expert(db: Session, expert_id: str) -> list[Proposal]:
        return (
            db.query(Proposal)
            .options(joinedload(Proposal.project))
            .filter(Proposal.expert_id == expert_id)
            .order_by(Proposal.created_at.desc())
            .all()
        )
