# api/main.py
"""
FastAPI backend for frame_fea - exposes the static frame solver as a REST API.
"""

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from frame_fea import (
    AnalysisSettings,
    BeamElement,
    BeamSection,
    FEAEngine,
    FEAError,
    FixedDOF,
    Load,
    Material,
    Model,
    Node,
    Vector3D,
)
from frame_fea.validation import validate_model
from frame_fea.verification import run_verification

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Frame FEA API",
    description="Linear static analysis of 3D beam frames",
    version="0.1.0"
)

# CORS for the model editor / viewer frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request/Response Models
# =============================================================================

class Vec3(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class FixityData(BaseModel):
    """Restraint flags; True holds the DOF at zero."""
    dx: bool = False
    dy: bool = False
    dz: bool = False
    rx: bool = False
    ry: bool = False
    rz: bool = False


class NodeData(BaseModel):
    id: int
    x: float
    y: float
    z: float
    fixed: FixityData = Field(default_factory=FixityData)


class MaterialData(BaseModel):
    id: int
    name: str = ""
    E: float = Field(..., description="Young's modulus (Pa)")
    poisson_ratio: float = 0.3
    density: float = 7850.0
    yield_strength: float = 235e6


class SectionData(BaseModel):
    id: int
    name: str = ""
    A: float = Field(..., description="Area (m²)")
    Iy: float = Field(..., description="Second moment about local y (m⁴)")
    Iz: float = Field(..., description="Second moment about local z (m⁴)")
    J: float = Field(..., description="Torsional constant (m⁴)")
    c_y: Optional[float] = Field(None, description="Extreme fiber distance for Iz bending (m)")
    c_z: Optional[float] = Field(None, description="Extreme fiber distance for Iy bending (m)")


class ElementData(BaseModel):
    id: int
    node_i: int
    node_j: int
    material_id: int
    section_id: int


class LoadData(BaseModel):
    id: int
    node_id: int
    force: Vec3 = Field(default_factory=Vec3)
    moment: Vec3 = Field(default_factory=Vec3)


class SettingsData(BaseModel):
    analysis_type: str = "static"
    tolerance: float = 1e-6
    max_iterations: int = 100
    include_geometric_nonlinearity: bool = False
    include_material_nonlinearity: bool = False


class ModelData(BaseModel):
    """Complete frame model as sent by the editor."""
    nodes: List[NodeData] = Field(default_factory=list)
    elements: List[ElementData] = Field(default_factory=list)
    materials: List[MaterialData] = Field(default_factory=list)
    sections: List[SectionData] = Field(default_factory=list)
    loads: List[LoadData] = Field(default_factory=list)
    settings: SettingsData = Field(default_factory=SettingsData)


class NodeResult(BaseModel):
    node_id: int
    ux: float
    uy: float
    uz: float
    reaction: Vec3


class ElementResultData(BaseModel):
    element_id: int
    axial_force: float
    my: float
    mz: float
    stress: float
    strain: float


class AnalysisResponse(BaseModel):
    """Solve result. On failure only `success`, `error` and `errors` are set."""
    success: bool
    error: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
    nodes: Optional[List[NodeResult]] = None
    elements: Optional[List[ElementResultData]] = None
    stress_range: Optional[Dict[str, float]] = None
    max_displacement: Optional[float] = None


class VerificationRow(BaseModel):
    case: str
    quantity: str
    computed: float
    theoretical: float
    relative_error: float
    passed: bool


# =============================================================================
# Conversion
# =============================================================================

def to_model(data: ModelData) -> Model:
    """Build a frame_fea Model from request data."""
    return Model(
        nodes=[
            Node(n.id, n.x, n.y, n.z, FixedDOF(**n.fixed.model_dump()))
            for n in data.nodes
        ],
        elements=[
            BeamElement(e.id, e.node_i, e.node_j, e.material_id, e.section_id)
            for e in data.elements
        ],
        materials=[
            Material(m.id, m.name, m.E, m.poisson_ratio, m.density, m.yield_strength)
            for m in data.materials
        ],
        sections=[
            BeamSection(s.id, s.name, s.A, s.Iy, s.Iz, s.J, s.c_y, s.c_z)
            for s in data.sections
        ],
        loads=[
            Load(
                l.id, l.node_id,
                force=Vector3D(l.force.x, l.force.y, l.force.z),
                moment=Vector3D(l.moment.x, l.moment.y, l.moment.z),
            )
            for l in data.loads
        ],
    )


def analyze_model(data: ModelData) -> AnalysisResponse:
    """Validate and solve. Returns an unsuccessful response instead of raising."""
    model = to_model(data)

    report = validate_model(model)
    if not report.is_valid:
        return AnalysisResponse(success=False, error="Invalid model", errors=report.errors)

    try:
        settings = AnalysisSettings(**data.settings.model_dump())
        engine = FEAEngine(model, settings)
        result = engine.solve_static()
    except (FEAError, ValueError) as e:
        logger.warning("Analysis failed: %s", e)
        return AnalysisResponse(success=False, error=str(e))

    nodes = []
    for node_id, u, R in zip(result.node_ids, result.displacements, result.reactions):
        nodes.append(NodeResult(
            node_id=node_id,
            ux=float(u[0]), uy=float(u[1]), uz=float(u[2]),
            reaction=Vec3(x=float(R[0]), y=float(R[1]), z=float(R[2])),
        ))

    elements = [
        ElementResultData(
            element_id=eid,
            axial_force=r.axial_force,
            my=r.moments.my,
            mz=r.moments.mz,
            stress=r.stress,
            strain=r.strain,
        )
        for eid, r in zip(result.element_ids, result.elements)
    ]

    return AnalysisResponse(
        success=True,
        nodes=nodes,
        elements=elements,
        stress_range=engine.get_stress_range(),
        max_displacement=result.max_displacement(),
    )


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/")
def root():
    """Health check."""
    return {"status": "ok", "service": "Frame FEA API"}


# Plain `def` endpoints run in the worker thread pool; each request builds
# its own engine so no solver state is shared between requests.
@app.post("/api/analyze", response_model=AnalysisResponse)
def analyze(data: ModelData):
    """Validate and solve a frame model."""
    return analyze_model(data)


@app.get("/api/verification", response_model=List[VerificationRow])
def verification(divisions: int = 2):
    """Run the closed-form verification cases at the given mesh density."""
    if divisions < 1 or divisions > 100:
        raise HTTPException(status_code=400, detail="divisions must be between 1 and 100")

    df = run_verification(divisions)
    return [
        VerificationRow(
            case=str(row.case),
            quantity=str(row.quantity),
            computed=float(row.computed),
            theoretical=float(row.theoretical),
            relative_error=float(row.relative_error),
            passed=bool(row.passed),
        )
        for row in df.itertuples(index=False)
    ]


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
