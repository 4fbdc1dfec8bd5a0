# database.py
# Append-only history of analysis results

import json
import sqlite3
import uuid
from datetime import datetime
from typing import Dict, List, Optional

import config
from models import FAKE, FILE, REAL, UNVERIFIED, AnalysisRequest, AnalysisResult

PREVIEW_CHARS = 200


class AnalysisHistory:
    def __init__(self, db_name: str = config.DATABASE_NAME):
        self.db_name = db_name
        self.init_database()

    def init_database(self):
        """Initialize database with required tables"""
        conn = sqlite3.connect(self.db_name)
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS analysis_history (
                id TEXT PRIMARY KEY,
                input_type TEXT NOT NULL,
                content_preview TEXT NOT NULL,
                file_name TEXT,
                verdict TEXT NOT NULL,
                confidence_score INTEGER NOT NULL,
                explanation TEXT,
                result_json TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_analysis_history_created
            ON analysis_history(created_at)
        """)

        conn.commit()
        conn.close()

    def append(self, request: AnalysisRequest, result: AnalysisResult) -> str:
        """Store one result, returns its generated id"""
        record_id = uuid.uuid4().hex
        conn = sqlite3.connect(self.db_name)
        try:
            conn.execute("""
                INSERT INTO analysis_history (
                    id, input_type, content_preview, file_name, verdict,
                    confidence_score, explanation, result_json, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                record_id,
                request.input_type,
                preview_for(request),
                request.file_name,
                result.verdict,
                result.confidence_score,
                result.explanation,
                json.dumps(result.to_dict()),
                datetime.now().isoformat(),
            ))
            conn.commit()
        finally:
            conn.close()
        return record_id

    def list_recent(self, limit: int = 50) -> List[Dict]:
        """Most recent records first, without the full result payload"""
        conn = sqlite3.connect(self.db_name)
        cursor = conn.cursor()

        cursor.execute("""
            SELECT id, input_type, content_preview, file_name, verdict,
                   confidence_score, explanation, created_at
            FROM analysis_history
            ORDER BY created_at DESC, rowid DESC
            LIMIT ?
        """, (max(int(limit), 0),))
        results = cursor.fetchall()
        columns = [desc[0] for desc in cursor.description]
        conn.close()

        return [dict(zip(columns, row)) for row in results]

    def get(self, record_id: str) -> Optional[Dict]:
        """Retrieve one record with its full result, or None"""
        conn = sqlite3.connect(self.db_name)
        cursor = conn.cursor()

        cursor.execute("SELECT * FROM analysis_history WHERE id = ?", (record_id,))
        row = cursor.fetchone()
        columns = [desc[0] for desc in cursor.description]
        conn.close()

        if not row:
            return None
        record = dict(zip(columns, row))
        record['result'] = json.loads(record.pop('result_json'))
        return record

    def stats(self) -> Dict:
        """Verdict counts and average confidence over every stored record"""
        conn = sqlite3.connect(self.db_name)
        cursor = conn.cursor()

        cursor.execute("""
            SELECT COUNT(*),
                   SUM(CASE WHEN verdict = ? THEN 1 ELSE 0 END),
                   SUM(CASE WHEN verdict = ? THEN 1 ELSE 0 END),
                   SUM(CASE WHEN verdict = ? THEN 1 ELSE 0 END),
                   AVG(confidence_score)
            FROM analysis_history
        """, (REAL, FAKE, UNVERIFIED))
        total, real, fake, unverified, average = cursor.fetchone()
        conn.close()

        return {
            'total': total,
            'real': real or 0,
            'fake': fake or 0,
            'unverified': unverified or 0,
            'avg_confidence': round(average) if average is not None else 0,
        }

    def clear(self) -> int:
        """Clear all history (use with caution!)"""
        conn = sqlite3.connect(self.db_name)
        cursor = conn.cursor()
        cursor.execute("DELETE FROM analysis_history")
        deleted = cursor.rowcount
        conn.commit()
        conn.close()
        return deleted


def preview_for(request: AnalysisRequest) -> str:
    if request.input_type == FILE and request.file_name:
        return request.file_name
    return (request.content or "").strip()[:PREVIEW_CHARS]
