"""
Configuration for the SEO criteria evaluation engine
"""

CRITERIA = [
    {
        "id": 1,
        "title": "seo.sections.core_essentials",
        "criteria": [
            {
                "id": 101,
                "description": "seo.criteria.core.keyword_in_title.description",
                "weight": 30,
                "status_type": "ternary",
                "evaluation_status": {
                    "success": "seo.criteria.core.keyword_in_title.success",
                    "warning": "seo.criteria.core.keyword_in_title.warning",
                    "error": "seo.criteria.core.keyword_in_title.error",
                },
                "input_keys": ["metaTitle", "primaryKeyword"],
                "warning_score": 21,
            },
            {
                "id": 102,
                "description": "seo.criteria.core.keyword_in_meta.description",
                "weight": 4,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.core.keyword_in_meta.success",
                    "error": "seo.criteria.core.keyword_in_meta.error",
                },
                "input_keys": ["metaDescription", "primaryKeyword"],
            },
            {
                "id": 103,
                "description": "seo.criteria.core.keyword_in_url.description",
                "weight": 3,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.core.keyword_in_url.success",
                    "error": "seo.criteria.core.keyword_in_url.error",
                },
                "input_keys": ["urlSlug", "primaryKeyword"],
            },
            {
                "id": 104,
                "description": "seo.criteria.core.keyword_in_first_10.description",
                "weight": 4,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.core.keyword_in_first_10.success",
                    "error": "seo.criteria.core.keyword_in_first_10.error",
                },
                "input_keys": ["content", "primaryKeyword"],
                "optimizable": False,
            },
            {
                "id": 105,
                "description": "seo.criteria.core.keyword_in_content.description",
                "weight": 3,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.core.keyword_in_content.success",
                    "error": "seo.criteria.core.keyword_in_content.error",
                },
                "input_keys": ["content", "primaryKeyword"],
                "optimizable": False,
            },
            {
                "id": 106,
                "description": "seo.criteria.core.content_length.description",
                "weight": 4,
                "status_type": "ternary",
                "evaluation_status": {
                    "success": "seo.criteria.core.content_length.success",
                    "warning": "seo.criteria.core.content_length.warning",
                    "error": "seo.criteria.core.content_length.error",
                },
                "input_keys": ["content"],
                "warning_score": 3,
                "optimizable": False,
            },
            {
                "id": 107,
                "description": "seo.criteria.core.meta_description_length.description",
                "weight": 3,
                "status_type": "ternary",
                "evaluation_status": {
                    "success": "seo.criteria.core.meta_description_length.success",
                    "warning": "seo.criteria.core.meta_description_length.warning",
                    "error": "seo.criteria.core.meta_description_length.error",
                },
                "input_keys": ["metaDescription"],
            },
        ],
    },
    {
        "id": 2,
        "title": "seo.sections.boosters",
        "criteria": [
            {
                "id": 201,
                "description": "seo.criteria.boosters.keyword_in_subheadings.description",
                "weight": 4,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.boosters.keyword_in_subheadings.success",
                    "error": "seo.criteria.boosters.keyword_in_subheadings.error",
                },
                "input_keys": ["content", "primaryKeyword"],
                "optimizable": False,
            },
            {
                "id": 202,
                "description": "seo.criteria.boosters.keyword_density.description",
                "weight": 3,
                "status_type": "ternary",
                "evaluation_status": {
                    "success": "seo.criteria.boosters.keyword_density.success",
                    "warning": "seo.criteria.boosters.keyword_density.warning",
                    "error": "seo.criteria.boosters.keyword_density.error",
                },
                "input_keys": ["content", "primaryKeyword"],
                "warning_score": 2,
                "optimizable": False,
            },
            {
                "id": 203,
                "description": "seo.criteria.boosters.url_slug_length.description",
                "weight": 4,
                "status_type": "ternary",
                "evaluation_status": {
                    "success": "seo.criteria.boosters.url_slug_length.success",
                    "warning": "seo.criteria.boosters.url_slug_length.warning",
                    "error": "seo.criteria.boosters.url_slug_length.error",
                },
                "input_keys": ["urlSlug"],
                "warning_score": 3,
            },
            {
                "id": 204,
                "description": "seo.criteria.boosters.external_links.description",
                "weight": 3,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.boosters.external_links.success",
                    "error": "seo.criteria.boosters.external_links.error",
                },
                "input_keys": ["content", "externalLinks"],
                "optimizable": False,
            },
            {
                "id": 205,
                "description": "seo.criteria.boosters.dofollow_links.description",
                "weight": 4,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.boosters.dofollow_links.success",
                    "error": "seo.criteria.boosters.dofollow_links.error",
                },
                "input_keys": ["content", "externalLinks"],
                "optimizable": False,
            },
            {
                "id": 206,
                "description": "seo.criteria.boosters.internal_links.description",
                "weight": 3,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.boosters.internal_links.success",
                    "error": "seo.criteria.boosters.internal_links.error",
                },
                "input_keys": ["content", "internalLinks"],
                "optimizable": False,
            },
            {
                "id": 207,
                "description": "seo.criteria.boosters.secondary_keywords.description",
                "weight": 4,
                "status_type": "ternary",
                "evaluation_status": {
                    "success": "seo.criteria.boosters.secondary_keywords.success",
                    "warning": "seo.criteria.boosters.secondary_keywords.warning",
                    "error": "seo.criteria.boosters.secondary_keywords.error",
                },
                "input_keys": ["content", "secondaryKeywords"],
                "optimizable": False,
            },
        ],
    },
    {
        "id": 3,
        "title": "seo.sections.title_optimization",
        "criteria": [
            {
                "id": 301,
                "description": "seo.criteria.title.keyword_at_start.description",
                "weight": 10,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.title.keyword_at_start.success",
                    "error": "seo.criteria.title.keyword_at_start.error",
                },
                "input_keys": ["title", "primaryKeyword"],
            },
            {
                "id": 302,
                "description": "seo.criteria.title.sentiment.description",
                "weight": 4,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.title.sentiment.success",
                    "error": "seo.criteria.title.sentiment.error",
                },
                "input_keys": ["title"],
                "optimizable": False,
            },
            {
                "id": 303,
                "description": "seo.criteria.title.power_words.description",
                "weight": 3,
                "status_type": "ternary",
                "evaluation_status": {
                    "success": "seo.criteria.title.power_words.success",
                    "warning": "seo.criteria.title.power_words.warning",
                    "error": "seo.criteria.title.power_words.error",
                },
                "input_keys": ["title"],
                "warning_score": 2,
                "optimizable": False,
            },
            {
                "id": 304,
                "description": "seo.criteria.title.meta_title_length.description",
                "weight": 3,
                "status_type": "ternary",
                "evaluation_status": {
                    "success": "seo.criteria.title.meta_title_length.success",
                    "warning": "seo.criteria.title.meta_title_length.warning",
                    "error": "seo.criteria.title.meta_title_length.error",
                },
                "input_keys": ["metaTitle"],
            },
        ],
    },
    {
        "id": 4,
        "title": "seo.sections.content_clarity",
        "criteria": [
            {
                "id": 401,
                "description": "seo.criteria.clarity.table_of_contents.description",
                "weight": 4,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.clarity.table_of_contents.success",
                    "error": "seo.criteria.clarity.table_of_contents.error",
                },
                "input_keys": ["content", "toc"],
            },
            {
                "id": 402,
                "description": "seo.criteria.clarity.short_paragraphs.description",
                "weight": 4,
                "status_type": "ternary",
                "evaluation_status": {
                    "success": "seo.criteria.clarity.short_paragraphs.success",
                    "warning": "seo.criteria.clarity.short_paragraphs.warning",
                    "error": "seo.criteria.clarity.short_paragraphs.error",
                },
                "input_keys": ["content"],
                "warning_score": 3,
                "optimizable": False,
            },
            {
                "id": 403,
                "description": "seo.criteria.clarity.media_content.description",
                "weight": 4,
                "status_type": "binary",
                "evaluation_status": {
                    "success": "seo.criteria.clarity.media_content.success",
                    "error": "seo.criteria.clarity.media_content.error",
                },
                "input_keys": ["content", "images"],
                "optimizable": False,
            },
        ],
    },
]

RULES = {
    "keyword_in_first_10": {
        "leading_share": 0.1,
    },
    "content_length": {
        "success_min_words": 2500,
        "warning_min_words": 1000,
    },
    "meta_description_length": {
        "target_length_min": 140,
        "target_length_max": 160,
        "hard_min": 100,
        "hard_max": 200,
    },
    "keyword_density": {
        "target_density_min": 1.0,
        "target_density_max": 3.0,
    },
    "url_slug_length": {
        "target_words_min": 3,
        "target_words_max": 6,
        "hard_min": 2,
        "hard_max": 8,
        "stop_words": ["a", "an", "and", "the", "of", "for", "to", "in", "on", "with", "your", "how"],
    },
    "sentiment": {
        "positive_words": [
            "best", "top", "ultimate", "complete", "essential",
            "amazing", "perfect", "great", "excellent",
        ],
        "negative_words": [
            "worst", "terrible", "awful", "bad", "horrible",
            "avoid", "never", "don't",
        ],
    },
    "power_words": {
        "words": [
            "ultimate", "complete", "essential", "proven", "secret",
            "exclusive", "instant", "guaranteed", "powerful", "effective",
        ],
        "success_min": 2,
    },
    "meta_title_length": {
        "target_length_min": 50,
        "target_length_max": 60,
        "hard_min": 30,
        "hard_max": 70,
    },
    "table_of_contents": {
        "min_subheadings": 3,
    },
    "short_paragraphs": {
        "max_paragraph_words": 150,
        "success_share": 80,
        "warning_share": 60,
    },
}

ENGINE = {
    "default_warning_ratio": 0.7,
    "strict_tables": False,
    "logger_name": "seo-criteria",
}

ITERATIONS = {
    "default_count": 5,
    "max_count": 15,
    "plateau_patience": 2,
}

OUTPUT = {
    "dir": "output",
    "report_name": "seo_report.json",
}
