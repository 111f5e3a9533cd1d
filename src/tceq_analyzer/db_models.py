## aggregate tables built on top of the loaded CSV exports
## {cutoff_year} and {cutoff_fiscal_year} are filled in by db_loader.build_models

models = {
    "agg__projects_by_year_type": {
        "query": """
            SELECT
                year,
                type,
                COUNT(*) AS projects,
                SUM(duration) AS days
            FROM projects
            WHERE year IS NOT NULL
              AND year < {cutoff_year}
            GROUP BY year, type
            ORDER BY year, type
        """,
        "type": "table",
        "stmt_type": "create"
    },
    "agg__ogi_by_fiscal_year": {
        "query": """
            -- one row per investigation, dated by its earliest status
            WITH deduped AS (
                SELECT
                    investigation_number,
                    MIN(fiscal_year) AS fiscal_year
                FROM ogi_investigations
                WHERE investigation_number IS NOT NULL
                GROUP BY investigation_number
            )
            SELECT
                fiscal_year,
                COUNT(*) AS ogi_count
            FROM deduped
            WHERE fiscal_year IS NOT NULL
            GROUP BY fiscal_year
            ORDER BY fiscal_year
        """,
        "type": "table",
        "stmt_type": "create"
    },
    "stg__onsite_ogi_joined": {
        "query": """
            SELECT
                o.fiscal_year,
                o.total_count,
                g.ogi_count,
                o.total_count - g.ogi_count AS other_count
            FROM onsite_counts o
            JOIN agg__ogi_by_fiscal_year g
                ON o.fiscal_year = g.fiscal_year
            WHERE o.fiscal_year < {cutoff_fiscal_year}
            ORDER BY o.fiscal_year
        """,
        "type": "table",
        "stmt_type": "create"
    },
    "mart__onsite_breakdown": {
        "query": """
            SELECT fiscal_year, category, investigations
            FROM (
                SELECT fiscal_year, 'OGI camera' AS category, ogi_count AS investigations
                FROM stg__onsite_ogi_joined
                UNION ALL
                SELECT fiscal_year, 'Other' AS category, other_count AS investigations
                FROM stg__onsite_ogi_joined
            ) AS parts
            ORDER BY fiscal_year, category
        """,
        "type": "table",
        "stmt_type": "create"
    },
    "summary__van_investigations": {
        "query": """
            SELECT
                COUNT(DISTINCT investigation_number) AS investigations,
                MIN(status_date) AS first_status_date,
                MAX(status_date) AS last_status_date
            FROM van_investigations
        """,
        "type": "table",
        "stmt_type": "create"
    },
}

# table each model reads from, so a partial load only builds what it can
dependencies = {
    "agg__projects_by_year_type": {"projects"},
    "agg__ogi_by_fiscal_year": {"ogi_investigations"},
    "stg__onsite_ogi_joined": {"onsite_counts", "ogi_investigations"},
    "mart__onsite_breakdown": {"onsite_counts", "ogi_investigations"},
    "summary__van_investigations": {"van_investigations"},
}
