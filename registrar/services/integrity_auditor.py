"""
Integrity Auditor

Sweeps the stored tables for rows that break the registrar invariants:
orphaned enrollment references, duplicate student/course pairs and
out-of-domain field values. The enforcer prevents these on every write;
the audit catches rows written behind its back (manual SQL, imports,
a backend without foreign key support).
"""
import logging
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker

logger = logging.getLogger(__name__)


class IntegrityAuditor:
    """Run read-only integrity rules per table and summarize violations"""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory
        self.audit_rules = self._define_audit_rules()

    def _define_audit_rules(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Define audit rules for each table.

        Every query returns the number of violating rows (or pairs).

        Returns:
            dict: Audit rules per table
        """
        return {
            "students": [
                {
                    "name": "first_name_not_blank",
                    "type": "integrity",
                    "severity": "critical",
                    "query": "SELECT COUNT(*) FROM students WHERE first_name IS NULL OR TRIM(first_name) = ''"
                },
                {
                    "name": "last_name_not_blank",
                    "type": "integrity",
                    "severity": "critical",
                    "query": "SELECT COUNT(*) FROM students WHERE last_name IS NULL OR TRIM(last_name) = ''"
                },
                {
                    "name": "name_length",
                    "type": "range",
                    "severity": "critical",
                    "query": "SELECT COUNT(*) FROM students WHERE LENGTH(first_name) > 50 OR LENGTH(last_name) > 50"
                },
                {
                    "name": "email_syntax",
                    "type": "range",
                    "severity": "warning",
                    "query": "SELECT COUNT(*) FROM students WHERE email IS NOT NULL AND email NOT LIKE '%_@_%'"
                }
            ],
            "courses": [
                {
                    "name": "title_not_blank",
                    "type": "integrity",
                    "severity": "critical",
                    "query": "SELECT COUNT(*) FROM courses WHERE title IS NULL OR TRIM(title) = ''"
                },
                {
                    "name": "title_length",
                    "type": "range",
                    "severity": "critical",
                    "query": "SELECT COUNT(*) FROM courses WHERE LENGTH(title) > 100"
                },
                {
                    "name": "credits_range",
                    "type": "range",
                    "severity": "critical",
                    "query": "SELECT COUNT(*) FROM courses WHERE credits IS NULL OR credits < 0 OR credits > 10"
                }
            ],
            "enrollments": [
                {
                    "name": "student_reference_exists",
                    "type": "integrity",
                    "severity": "critical",
                    "query": """
                        SELECT COUNT(*) FROM enrollments e
                        WHERE NOT EXISTS (SELECT 1 FROM students s WHERE s.id = e.student_id)
                    """
                },
                {
                    "name": "course_reference_exists",
                    "type": "integrity",
                    "severity": "critical",
                    "query": """
                        SELECT COUNT(*) FROM enrollments e
                        WHERE NOT EXISTS (SELECT 1 FROM courses c WHERE c.id = e.course_id)
                    """
                },
                {
                    "name": "student_course_unique",
                    "type": "uniqueness",
                    "severity": "critical",
                    "query": """
                        SELECT COUNT(*) FROM (
                            SELECT student_id, course_id FROM enrollments
                            GROUP BY student_id, course_id
                            HAVING COUNT(*) > 1
                        ) duplicate_pairs
                    """
                },
                {
                    "name": "grade_range",
                    "type": "range",
                    "severity": "critical",
                    "query": "SELECT COUNT(*) FROM enrollments WHERE grade IS NOT NULL AND (grade < 0 OR grade > 100)"
                }
            ]
        }

    async def audit_table(self, table_name: str) -> Dict[str, Any]:
        """
        Run every rule defined for one table.

        Args:
            table_name: Name of table to audit

        Returns:
            dict: Violations found, with critical/warning counts

        Raises:
            ValueError: If no rules are defined for the table
        """
        if table_name not in self.audit_rules:
            raise ValueError(
                f"Invalid table: {table_name}. Must be one of: {sorted(self.audit_rules)}"
            )

        issues = []
        critical_count = 0
        warning_count = 0

        async with self._session_factory() as session:
            for rule in self.audit_rules[table_name]:
                try:
                    result = await session.execute(text(rule["query"]))
                    violation_count = result.scalar() or 0
                except Exception as e:
                    logger.error(f"Error running audit rule {rule['name']}: {e}")
                    issues.append({
                        "rule": rule["name"],
                        "error": str(e)
                    })
                    critical_count += 1
                    continue

                if violation_count > 0:
                    issues.append({
                        "rule": rule["name"],
                        "type": rule["type"],
                        "severity": rule["severity"],
                        "violations": violation_count
                    })

                    if rule["severity"] == "critical":
                        critical_count += 1
                    else:
                        warning_count += 1

        return {
            "table_name": table_name,
            "audit_time": datetime.utcnow().isoformat(),
            "consistent": critical_count == 0,
            "critical_issues": critical_count,
            "warnings": warning_count,
            "issues": issues
        }

    async def audit_all(self) -> Dict[str, Any]:
        """
        Audit every table and return a summary.

        Returns:
            dict: Per-table results and an overall consistent flag
        """
        results = []

        for table in self.audit_rules:
            table_result = await self.audit_table(table)
            results.append(table_result)

            for issue in table_result["issues"]:
                if "violations" in issue:
                    logger.warning(
                        f"Integrity ALERT: {table}.{issue['rule']} has "
                        f"{issue['violations']} violation(s) ({issue['severity']})"
                    )

        return {
            "audit_time": datetime.utcnow().isoformat(),
            "tables_audited": len(results),
            "consistent": all(r["consistent"] for r in results),
            "tables_with_issues": sum(1 for r in results if r["issues"]),
            "results": results
        }
