"""Sample SGF records and renderer stubs shared by the test modules."""

from typing import List

from sgf_service.diagram.renderer import RenderRequest

SIMPLE_GAME = "(;FF[4]GM[1]SZ[19];B[dd];W[pd])"
HANDICAP_GAME = "(;FF[4]GM[1]SZ[19]HA[4]AB[dd][pd][dp][pp];W[qf])"
BRANCHED_GAME = "(;FF[4]GM[1]SZ[19];B[dd](;W[pd])(;W[dp]))"
ESCAPED_GAME = r"(;FF[4]GM[1]SZ[19]GN[Test: Game \] with [special\] chars];B[dd])"

FULL_HEADER_GAME = (
    "(;FF[4]GM[1]SZ[19]CA[UTF-8]AP[CGoban:3]ST[2]"
    "GN[Final]EV[Honinbo]RO[3]DT[2023-05-01]PC[Tokyo]"
    "PB[Shin Jinseo]PW[Ke Jie]BR[9p]WR[9p]BT[Korea]WT[China]"
    "RU[Japanese]KM[6.5]HA[0]TM[7200]OT[5x60 byo-yomi]RE[B+R]"
    "SO[Broadcast]US[recorder]AN[pro]CP[public]GC[Decisive game]"
    "VW[aa:ss]MULTIGOGM[1]XX[a][b]"
    ";B[pd];W[dd];B[pq];W[dp];B[fq])"
)

# Black surrounds and captures the white stone at bb.
CAPTURE_GAME = (
    "(;FF[4]GM[1]SZ[9]"
    ";B[ab];W[bb];B[ba];W[ee];B[cb];W[ff];B[bc])"
)


def make_game(moves: int, size: int = 19) -> str:
    """A main line of ``moves`` alternating moves on distinct points."""
    letters = "abcdefghijklmnopqrs"[:size]
    nodes: List[str] = []
    for i in range(moves):
        color = "B" if i % 2 == 0 else "W"
        point = letters[i % size] + letters[(i // size) % size]
        nodes.append(f";{color}[{point}]")
    return f"(;FF[4]GM[1]SZ[{size}]" + "".join(nodes) + ")"


class RecordingRenderer:
    """Renderer stub that records requests and returns fixed bytes."""

    def __init__(self, payload: bytes = b"\x89PNG\r\n\x1a\nstub"):
        self.payload = payload
        self.requests: List[RenderRequest] = []

    async def render(self, request: RenderRequest) -> bytes:
        self.requests.append(request)
        return self.payload


class FailingRenderer:
    """Renderer stub that always raises."""

    async def render(self, request: RenderRequest) -> bytes:
        raise RuntimeError("renderer exploded")
