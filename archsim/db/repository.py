from __future__ import annotations

import uuid
from typing import List

from .models import ScenarioRecord
from .session import session_scope


class ScenarioRepository:
    def create(self, scenario: ScenarioRecord) -> ScenarioRecord:
        with session_scope() as session:
            session.add(scenario)
            session.flush()
            session.refresh(scenario)
            return scenario

    def get(self, scenario_id: uuid.UUID) -> ScenarioRecord | None:
        with session_scope() as session:
            return session.get(ScenarioRecord, scenario_id)

    def list_all(self) -> List[ScenarioRecord]:
        with session_scope() as session:
            return list(session.query(ScenarioRecord).order_by(ScenarioRecord.created_at).all())

    def delete(self, scenario_id: uuid.UUID) -> bool:
        with session_scope() as session:
            scenario = session.get(ScenarioRecord, scenario_id)
            if not scenario:
                return False
            session.delete(scenario)
            return True
