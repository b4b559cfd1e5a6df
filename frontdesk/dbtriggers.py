"""
Store-side triggers shared with the existing clinic database.

On every visit insert the store assigns the visit's outpatient number
(``OP`` + 5-digit visit id), the patient's registration number
(``REG`` + patient code) and bumps the patient's ``total_visits``.  On a
lab-test result change it stamps ``result_updated_at``.  Application code
relies on these and must not repeat them.

Installed by migration ``0002_store_triggers`` for SQLite and PostgreSQL.
"""
import logging

logger = logging.getLogger(__name__)

SQLITE_INSTALL = [
    """
    CREATE TRIGGER IF NOT EXISTS visits_after_insert
    AFTER INSERT ON visits
    FOR EACH ROW
    BEGIN
        UPDATE patients
           SET reg_no = COALESCE(reg_no, 'REG' || patient_id)
         WHERE patient_id = NEW.patient_id;
        UPDATE visits
           SET op_no = COALESCE(NEW.op_no, 'OP' || substr('00000' || NEW.visit_id, -5, 5)),
               reg_no = COALESCE(NEW.reg_no, (SELECT reg_no FROM patients WHERE patient_id = NEW.patient_id))
         WHERE visit_id = NEW.visit_id;
        UPDATE patients
           SET total_visits = COALESCE(total_visits, 0) + 1,
               op_no = (SELECT op_no FROM visits WHERE visit_id = NEW.visit_id)
         WHERE patient_id = NEW.patient_id;
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS labtests_result_updated
    AFTER UPDATE OF result ON labtests
    FOR EACH ROW
    WHEN NEW.result IS NOT OLD.result
    BEGIN
        UPDATE labtests SET result_updated_at = CURRENT_TIMESTAMP WHERE test_id = NEW.test_id;
    END
    """,
]

SQLITE_UNINSTALL = [
    "DROP TRIGGER IF EXISTS visits_after_insert",
    "DROP TRIGGER IF EXISTS labtests_result_updated",
]

POSTGRES_INSTALL = [
    """
    CREATE OR REPLACE FUNCTION visits_after_insert() RETURNS trigger AS $$
    DECLARE
        patient_reg_no varchar;
        visit_op_no varchar;
    BEGIN
        UPDATE patients
           SET reg_no = COALESCE(reg_no, 'REG' || patient_id)
         WHERE patient_id = NEW.patient_id
        RETURNING reg_no INTO patient_reg_no;
        visit_op_no := COALESCE(NEW.op_no, 'OP' || lpad(NEW.visit_id::text, 5, '0'));
        UPDATE visits
           SET op_no = visit_op_no,
               reg_no = COALESCE(NEW.reg_no, patient_reg_no)
         WHERE visit_id = NEW.visit_id;
        UPDATE patients
           SET total_visits = COALESCE(total_visits, 0) + 1,
               op_no = visit_op_no
         WHERE patient_id = NEW.patient_id;
        RETURN NULL;
    END;
    $$ LANGUAGE plpgsql
    """,
    "DROP TRIGGER IF EXISTS visits_after_insert ON visits",
    """
    CREATE TRIGGER visits_after_insert
    AFTER INSERT ON visits
    FOR EACH ROW EXECUTE FUNCTION visits_after_insert()
    """,
    """
    CREATE OR REPLACE FUNCTION labtests_result_updated() RETURNS trigger AS $$
    BEGIN
        IF NEW.result IS DISTINCT FROM OLD.result THEN
            NEW.result_updated_at := now();
        END IF;
        RETURN NEW;
    END;
    $$ LANGUAGE plpgsql
    """,
    "DROP TRIGGER IF EXISTS labtests_result_updated ON labtests",
    """
    CREATE TRIGGER labtests_result_updated
    BEFORE UPDATE ON labtests
    FOR EACH ROW EXECUTE FUNCTION labtests_result_updated()
    """,
]

POSTGRES_UNINSTALL = [
    "DROP TRIGGER IF EXISTS visits_after_insert ON visits",
    "DROP FUNCTION IF EXISTS visits_after_insert()",
    "DROP TRIGGER IF EXISTS labtests_result_updated ON labtests",
    "DROP FUNCTION IF EXISTS labtests_result_updated()",
]

STATEMENTS = {
    'sqlite': (SQLITE_INSTALL, SQLITE_UNINSTALL),
    'postgresql': (POSTGRES_INSTALL, POSTGRES_UNINSTALL),
}


def _run(schema_editor, install: bool) -> None:
    vendor = schema_editor.connection.vendor
    if vendor not in STATEMENTS:
        logger.warning('No store triggers for database vendor %s; visit counters will not update', vendor)
        return
    statements = STATEMENTS[vendor][0 if install else 1]
    for sql in statements:
        schema_editor.execute(sql, params=None)


def install(apps, schema_editor) -> None:
    _run(schema_editor, install=True)


def uninstall(apps, schema_editor) -> None:
    _run(schema_editor, install=False)
