"""Team roster: teammates and the leaders who receive leadership feedback"""

from typing import Dict, List, Optional, Sequence
from pydantic import BaseModel


class Teammate(BaseModel):
    """Teammate reference entity"""
    id: str
    name: str
    sprite: str
    role: Optional[str] = None  # 'HOD' or 'Lead' for leaders


# Leaders share the teammate shape; the role tag is what sets them apart
Leader = Teammate


TEAMMATES: List[Teammate] = [
    Teammate(id='md-ali-chowdhury', name='Ali', sprite='https://i.postimg.cc/66gCmBPc/Ali.png'),
    Teammate(id='farhan-bin-islam', name='Farhan', sprite='https://i.postimg.cc/4xbtyVx2/Farhan.png'),
    Teammate(id='suha-hussein', name='Suha', sprite='https://i.postimg.cc/x1SFJwKf/Suha.png'),
    Teammate(id='nazibul-haq', name='Nazibul', sprite='https://i.postimg.cc/907whqkp/Nazibul.png'),
    Teammate(id='md-mahidun-nabi', name='Mahi', sprite='https://i.postimg.cc/tgBxtbPh/Mahi.png'),
    Teammate(id='api-singha', name='Abhi', sprite='https://i.postimg.cc/7hG0ZR5S/Abhi.png'),
    Teammate(id='hm-saif-noor', name='Saif', sprite='https://i.postimg.cc/HWRNHcn7/Saif.png'),
    Teammate(id='muhammad-rahat-bin-yousuf', name='Rahat', sprite='https://i.postimg.cc/1tTV2KvX/Rahat.png'),
    Teammate(id='tashfia-haque', name='Tashfia', sprite='https://i.postimg.cc/d05WfDg3/Tashfia.png'),
    Teammate(id='robiul', name='Robiul', sprite='https://i.postimg.cc/8sgJPzQV/Robiul.png'),
    Teammate(id='mehedi-hasan-aunim', name='Aunim', sprite='https://i.postimg.cc/BbrDLCFk/Aunim.png'),
    Teammate(id='tashfeen-sara', name='Tashfeen', sprite='https://i.postimg.cc/5t47p87D/Tashfeen.png'),
    Teammate(id='maheem-khondoker', name='Maheem', sprite='https://i.postimg.cc/43fc9yKf/Maheem.png'),
    Teammate(id='vicky', name='Vicky', sprite='https://i.postimg.cc/MpSLsh2K/Chat-GPT-Image-Dec-30-2025-12-54-31-PM.png'),
    Teammate(id='sheikh-mohammed-fahim', name='Fahim', sprite='https://i.postimg.cc/T3XgTCfW/Fahim.png'),
    Teammate(id='aminul', name='Aminul', sprite='https://i.postimg.cc/pXjKNgbH/Aminul.png'),
    Teammate(id='tajrian-rahman', name='Tajrian', sprite='https://i.postimg.cc/mgNpQmwQ/Tajrian.png'),
]

# HOD and Leads for yearly leadership feedback
LEADERS: List[Leader] = [
    Leader(id='sheikh-mohammed-fahim', name='Fahim', sprite='https://i.postimg.cc/T3XgTCfW/Fahim.png', role='HOD'),
    Leader(id='tashfeen-sara', name='Tashfeen', sprite='https://i.postimg.cc/5t47p87D/Tashfeen.png', role='Lead'),
    Leader(id='mehedi-hasan-aunim', name='Aunim', sprite='https://i.postimg.cc/BbrDLCFk/Aunim.png', role='Lead'),
    Leader(id='api-singha', name='Abhi', sprite='https://i.postimg.cc/7hG0ZR5S/Abhi.png', role='Lead'),
    Leader(id='hm-saif-noor', name='Saif', sprite='https://i.postimg.cc/HWRNHcn7/Saif.png', role='Lead'),
]


class Roster:
    """Id -> display name lookups over the teammate and leader lists"""

    def __init__(
        self,
        teammates: Optional[Sequence[Teammate]] = None,
        leaders: Optional[Sequence[Leader]] = None
    ):
        self.teammates: Dict[str, Teammate] = {t.id: t for t in (TEAMMATES if teammates is None else teammates)}
        self.leaders: Dict[str, Leader] = {l.id: l for l in (LEADERS if leaders is None else leaders)}

    def teammate_name(self, teammate_id: str) -> str:
        """Teammate display name, or the raw id when unknown"""
        teammate = self.teammates.get(teammate_id)
        return teammate.name if teammate else teammate_id

    def teammate_names(self, teammate_ids: Sequence[str]) -> List[str]:
        return [self.teammate_name(teammate_id) for teammate_id in teammate_ids]

    def leader_name(self, leader_id: str) -> str:
        """Leader display name, or the raw id when unknown"""
        leader = self.leaders.get(leader_id)
        return leader.name if leader else leader_id

    def leader_name_with_role(self, leader_id: str) -> str:
        """Leader display name with role suffix, e.g. 'Fahim (HOD)'"""
        leader = self.leaders.get(leader_id)
        if not leader:
            return leader_id
        return f"{leader.name} ({leader.role or 'Leader'})"
