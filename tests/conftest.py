"""Shared fixtures for the standings test suite."""

import textwrap

import pytest

from src.data_pipeline.cleaning import DataCleaner
from src.data_pipeline.team_aggregation import TeamAggregator
from src.scoring_engine.models import TeamStatLine

PERIOD_1_CSV = """\
player_name,team_code,position,AB,H,R,HR,RBI,SB,W,SV,K,IP,ER,WHIP
Mookie Betts,DDG,OF,100,30,20,5,15,3,0,0,0,0,0,0
Clayton Kershaw,DDG,SP,0,0,0,0,0,0,3,0,30,30,9,1.10
Freddie Freeman,DEV,1B,100,25,15,8,20,1,0,0,0,0,0,0
Josh Hader,DEV,RP,0,0,0,0,0,0,1,10,25,20,4,0.90
Juan Soto,DKG,OF,100,28,18,6,12,2,0,0,0,0,0,0
Max Fried,DKG,SP,0,0,0,0,0,0,2,0,28,25,10,1.20
"""

PERIOD_2_CSV = """\
Player,Team,Pos,AB,H,R,HR,RBI,SB,W,SV,K,IP,ER,WHIP
Mookie Betts,DDG,OF,"1,000",300,10,2,8,1,0,0,0,0,0,0
Clayton Kershaw,DDG,SP,0,0,0,0,0,0,1,0,12,12,6,1.50
Freddie Freeman,DEV,1B,90,30,22,7,18,0,0,0,0,0,0,0
Josh Hader,DEV,RP,0,0,0,0,0,0,0,8,15,10,1,0.80
Juan Soto,DKG,OF,95,22,12,4,10,4,0,0,0,0,0,0
Max Fried,DKG,SP,0,0,0,0,0,0,2,0,20,18,5,1.00
"""


def _make_line(team_id, name, **stats):
    return TeamStatLine(team_id=team_id, team_name=name, stats=stats)


@pytest.fixture
def three_teams():
    """Team A/B/C with R and ERA values from the league's worked example."""
    return [
        _make_line(1, "Team A", R=10, ERA=3.00),
        _make_line(2, "Team B", R=20, ERA=4.00),
        _make_line(3, "Team C", R=10, ERA=2.00),
    ]


@pytest.fixture(scope="module")
def cleaner():
    return DataCleaner()


@pytest.fixture(scope="module")
def aggregator():
    return TeamAggregator()


@pytest.fixture
def period_dir(tmp_path):
    """Directory holding two synthetic period exports."""
    data_dir = tmp_path / "raw" / "2025"
    data_dir.mkdir(parents=True)
    (data_dir / "period_1.csv").write_text(textwrap.dedent(PERIOD_1_CSV))
    (data_dir / "period_2.csv").write_text(textwrap.dedent(PERIOD_2_CSV))
    return data_dir


@pytest.fixture
def team_aliases():
    """Small alias table for the three synthetic teams."""
    return {
        "dodgerdawgs": "DDG",
        "devildawgs": "DEV",
        "diamondkings": "DKG",
    }
