"""
Roster snapshot: built-in sample clinic plus CSV persistence.

Doctors and treatments are owned by the caller; the matching core only reads
them. Targets and current case counts are stored in long form (one row per
doctor and treatment) so the CSV stays flat.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

import pandas as pd

from .errors import RosterError
from .models import Doctor, Rank, Treatment

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"
DOCTORS_CSV = "doctors.csv"
CASELOAD_CSV = "caseload.csv"
TREATMENTS_CSV = "treatments.csv"

DOCTOR_COLUMNS = ["doctor_id", "name", "rank", "dept", "monthly_total"]
CASELOAD_COLUMNS = ["doctor_id", "treatment", "target", "current"]
TREATMENT_COLUMNS = ["treatment_id", "name", "dept", "min_rank"]


def sample_treatments() -> List[Treatment]:
    return [
        Treatment("t-scaling", "Scaling", "Perio", Rank.INTERN),
        Treatment("t-filling", "Filling", "OD", Rank.INTERN),
        Treatment("t-rct", "Root Canal", "Endo", Rank.PGY),
        Treatment("t-extraction", "Extraction", "OS", Rank.PGY),
        Treatment("t-crown", "Crown", "Prostho", Rank.FR),
        Treatment("t-braces", "Braces", "Ortho", Rank.FR),
        Treatment("t-implant", "Implant", "OS", Rank.VS),
    ]


def sample_doctors() -> List[Doctor]:
    return [
        Doctor(1, "Chen", Rank.VS, "OS/Prostho", 60,
               {"Implant": 5, "Crown": 8, "Extraction": 10}, {"Implant": 2, "Crown": 6, "Extraction": 9}),
        Doctor(2, "Lin", Rank.FR, "Ortho", 95,
               {"Braces": 12}, {"Braces": 4}),
        Doctor(3, "Wang", Rank.PGY, "Endo/OD", 40,
               {"Root Canal": 10, "Filling": 15}, {"Root Canal": 3, "Filling": 12}),
        Doctor(4, "Huang", Rank.INTERN, "Perio/OD", 25,
               {"Scaling": 20, "Filling": 10}, {"Scaling": 5, "Filling": 2}),
        Doctor(5, "Lee", Rank.VS, "Endo/Prostho", 130,
               {"Root Canal": 6, "Crown": 6}, {"Root Canal": 6, "Crown": 1}),
        Doctor(6, "Wu", Rank.FR, "OS", 70,
               {"Extraction": 15, "Implant": 3}, {"Extraction": 6, "Implant": 0}),
        Doctor(7, "Tsai", Rank.PGY, "Perio", 55,
               {"Scaling": 18}, {"Scaling": 14}),
    ]


def sample_roster() -> Tuple[List[Doctor], List[Treatment]]:
    return sample_doctors(), sample_treatments()


def doctors_to_df(doctors: List[Doctor]) -> pd.DataFrame:
    records = []
    for d in doctors:
        records.append(
            {
                "doctor_id": d.doctor_id,
                "name": d.name,
                "rank": d.rank.label,
                "dept": d.dept,
                "monthly_total": d.monthly_total,
            }
        )
    return pd.DataFrame.from_records(records, columns=DOCTOR_COLUMNS)


def caseload_to_df(doctors: List[Doctor]) -> pd.DataFrame:
    records = []
    for d in doctors:
        for name in sorted(set(d.targets) | set(d.current_cases)):
            records.append(
                {
                    "doctor_id": d.doctor_id,
                    "treatment": name,
                    "target": d.targets.get(name),
                    "current": d.current_cases.get(name),
                }
            )
    return pd.DataFrame.from_records(records, columns=CASELOAD_COLUMNS)


def treatments_to_df(treatments: List[Treatment]) -> pd.DataFrame:
    records = [
        {"treatment_id": t.treatment_id, "name": t.name, "dept": t.dept, "min_rank": t.min_rank.label}
        for t in treatments
    ]
    return pd.DataFrame.from_records(records, columns=TREATMENT_COLUMNS)


def save_roster(doctors: List[Doctor], treatments: List[Treatment], out_dir: Path = DEFAULT_DATA_DIR) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    doctors_to_df(doctors).to_csv(out_dir / DOCTORS_CSV, index=False)
    caseload_to_df(doctors).to_csv(out_dir / CASELOAD_CSV, index=False)
    treatments_to_df(treatments).to_csv(out_dir / TREATMENTS_CSV, index=False)


def _require_columns(df: pd.DataFrame, columns: List[str], source: Path) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise RosterError(f"{source} is missing columns: {', '.join(missing)}")


def _parse_rank(value: object, source: Path) -> Rank:
    try:
        return Rank.parse(str(value))
    except ValueError as exc:
        raise RosterError(f"{source}: {exc}") from exc


def _caseload_maps(df: pd.DataFrame) -> Tuple[Dict[int, Dict[str, int]], Dict[int, Dict[str, int]]]:
    targets: Dict[int, Dict[str, int]] = {}
    current: Dict[int, Dict[str, int]] = {}
    for _, row in df.iterrows():
        doc_id = int(row["doctor_id"])
        name = str(row["treatment"])
        # Blank cells stay absent so the doctor's default policy applies.
        if pd.notna(row["target"]):
            targets.setdefault(doc_id, {})[name] = int(row["target"])
        if pd.notna(row["current"]):
            current.setdefault(doc_id, {})[name] = int(row["current"])
    return targets, current


def load_roster(data_dir: Path = DEFAULT_DATA_DIR) -> Tuple[List[Doctor], List[Treatment]]:
    doctors_path = data_dir / DOCTORS_CSV
    caseload_path = data_dir / CASELOAD_CSV
    treatments_path = data_dir / TREATMENTS_CSV
    if not (doctors_path.exists() and treatments_path.exists()):
        raise FileNotFoundError(f"Missing doctors/treatments CSV under {data_dir}")

    d_df = pd.read_csv(doctors_path, dtype={"dept": str, "name": str})
    t_df = pd.read_csv(treatments_path, dtype=str)
    c_df = pd.read_csv(caseload_path) if caseload_path.exists() else pd.DataFrame(columns=CASELOAD_COLUMNS)
    _require_columns(d_df, DOCTOR_COLUMNS, doctors_path)
    _require_columns(t_df, TREATMENT_COLUMNS, treatments_path)
    _require_columns(c_df, CASELOAD_COLUMNS, caseload_path)

    targets, current = _caseload_maps(c_df)
    doctors = []
    for _, row in d_df.iterrows():
        doc_id = int(row["doctor_id"])
        doctors.append(
            Doctor(
                doctor_id=doc_id,
                name=str(row["name"]),
                rank=_parse_rank(row["rank"], doctors_path),
                dept=str(row["dept"]),
                monthly_total=int(row["monthly_total"]),
                targets=targets.get(doc_id, {}),
                current_cases=current.get(doc_id, {}),
            )
        )
    if len({d.doctor_id for d in doctors}) != len(doctors):
        raise RosterError(f"{doctors_path} contains duplicate doctor ids")

    treatments = [
        Treatment(
            treatment_id=str(row["treatment_id"]),
            name=str(row["name"]),
            dept=str(row["dept"]),
            min_rank=_parse_rank(row["min_rank"], treatments_path),
        )
        for _, row in t_df.iterrows()
    ]
    return doctors, treatments


def load_or_sample(data_dir: Path = DEFAULT_DATA_DIR) -> Tuple[List[Doctor], List[Treatment]]:
    if (data_dir / DOCTORS_CSV).exists() and (data_dir / TREATMENTS_CSV).exists():
        return load_roster(data_dir)
    return sample_roster()
