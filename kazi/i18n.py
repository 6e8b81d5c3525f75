"""
English / Kiswahili strings for status messages, prompts and page labels.

Only the strings the controllers and the minimal pages need live here.
"""

from typing import Dict, Union

from kazi.models import DEFAULT_LOCALE, Locale

MESSAGES: Dict[str, Dict[str, str]] = {
    # ===== Auth: validation =====
    "login_fields_required": {
        "en": "Please enter both phone number and password",
        "sw": "Tafadhali weka nambari ya simu na nenosiri",
    },
    "register_fields_required": {
        "en": "Please fill in all required fields",
        "sw": "Tafadhali jaza sehemu zote zinazohitajika",
    },
    "password_too_short": {
        "en": "Password must be at least 6 characters long",
        "sw": "Nenosiri lazima liwe na herufi angalau 6",
    },
    "phone_required": {
        "en": "Please enter your phone number",
        "sw": "Tafadhali weka nambari yako ya simu",
    },
    "code_incomplete": {
        "en": "Please enter the complete verification code",
        "sw": "Tafadhali weka msimbo kamili wa uthibitisho",
    },
    "reset_fields_required": {
        "en": "Please fill in all fields",
        "sw": "Tafadhali jaza sehemu zote",
    },
    "passwords_mismatch": {
        "en": "Passwords do not match",
        "sw": "Nenosiri halinafanani",
    },
    "resend_wait": {
        "en": "Please wait {seconds} seconds before requesting a new code",
        "sw": "Tafadhali subiri sekunde {seconds} kabla ya kuomba msimbo mpya",
    },
    # ===== Auth: outcomes =====
    "login_success": {
        "en": "Login successful! Redirecting...",
        "sw": "Umefanikiwa kuingia! Unaelekezwa...",
    },
    "login_failed": {
        "en": "Login failed. Please check your credentials.",
        "sw": "Imeshindwa kuingia. Tafadhali angalia maelezo yako.",
    },
    "invalid_credentials": {
        "en": "Invalid phone number or password",
        "sw": "Nambari ya simu au nenosiri si sahihi",
    },
    "user_not_found": {
        "en": "User not found. Please check your phone number or register first.",
        "sw": "Mtumiaji hajapatikana. Tafadhali angalia nambari yako ya simu au jisajili kwanza.",
    },
    "network_error": {
        "en": "Network error. Please check your internet connection.",
        "sw": "Hitilafu ya mtandao. Tafadhali angalia muunganisho wako wa intaneti.",
    },
    "register_success": {
        "en": "Account created successfully! Redirecting...",
        "sw": "Akaunti imeundwa kikamilifu! Unaelekezwa...",
    },
    "register_failed": {
        "en": "Registration failed. Please try again.",
        "sw": "Usajili umeshindwa. Tafadhali jaribu tena.",
    },
    "user_exists": {
        "en": "User with this phone number already exists",
        "sw": "Mtumiaji wa nambari hii ya simu tayari yupo",
    },
    "reset_code_sent": {
        "en": "Reset code sent to your phone",
        "sw": "Msimbo wa kubadilisha umetumwa kwenye simu yako",
    },
    "reset_code_failed": {
        "en": "Failed to send reset code. Please try again.",
        "sw": "Imeshindwa kutuma msimbo wa kubadilisha. Tafadhali jaribu tena.",
    },
    "code_resent": {
        "en": "Verification code resent",
        "sw": "Msimbo wa uthibitisho umetumwa tena",
    },
    "password_reset_success": {
        "en": "Password reset successfully",
        "sw": "Nenosiri limebadilishwa kikamilifu",
    },
    "password_reset_failed": {
        "en": "Failed to reset password",
        "sw": "Imeshindwa kubadilisha nenosiri",
    },
    # ===== Busy labels =====
    "logging_in": {"en": "Logging in...", "sw": "Inaingia..."},
    "registering": {"en": "Creating account...", "sw": "Inaunda akaunti..."},
    "sending": {"en": "Sending...", "sw": "Inatuma..."},
    "resetting": {"en": "Resetting...", "sw": "Inabadilisha..."},
    "action_in_progress": {
        "en": "Please wait, your previous request is still in progress",
        "sw": "Tafadhali subiri, ombi lako la awali bado linaendelea",
    },
    # ===== Dashboard: loading =====
    "jobs_load_failed": {
        "en": "Failed to load jobs",
        "sw": "Imeshindwa kupakia kazi",
    },
    "workers_load_failed": {
        "en": "Failed to load workers",
        "sw": "Imeshindwa kupakia wafanyikazi",
    },
    # ===== Dashboard: jobs =====
    "employers_only": {
        "en": "Only employers can post jobs",
        "sw": "Ni waajiri pekee wanaweza kutangaza kazi",
    },
    "job_fields_required": {
        "en": "Please fill in the job title, description, location and phone number",
        "sw": "Tafadhali jaza kichwa, maelezo, eneo na nambari ya simu ya kazi",
    },
    "job_posted": {
        "en": "Job posted successfully!",
        "sw": "Kazi imetangazwa kikamilifu!",
    },
    "job_post_failed": {
        "en": "Failed to post job",
        "sw": "Imeshindwa kutangaza kazi",
    },
    "job_updated": {
        "en": "Job updated successfully!",
        "sw": "Kazi imesasishwa kikamilifu!",
    },
    "job_update_failed": {
        "en": "Failed to update job",
        "sw": "Imeshindwa kusasisha kazi",
    },
    "confirm_delete_job": {
        "en": "Are you sure you want to delete this job?",
        "sw": "Una uhakika unataka kufuta kazi hii?",
    },
    "job_deleted": {
        "en": "Job deleted successfully!",
        "sw": "Kazi imefutwa kikamilifu!",
    },
    "job_delete_failed": {
        "en": "Failed to delete job",
        "sw": "Imeshindwa kufuta kazi",
    },
    "favorite_added": {
        "en": "Added to favorites",
        "sw": "Imeongezwa kwenye vipendwa",
    },
    "favorite_removed": {
        "en": "Removed from favorites",
        "sw": "Imeondolewa kwenye vipendwa",
    },
    # ===== Dashboard: profile =====
    "profile_updated": {
        "en": "Profile updated successfully!",
        "sw": "Wasifu umesasishwa kikamilifu!",
    },
    "profile_update_failed": {
        "en": "Failed to update profile",
        "sw": "Imeshindwa kusasisha wasifu",
    },
    "confirm_delete_account": {
        "en": "Are you sure you want to delete your account? This action cannot be undone.",
        "sw": "Una uhakika unataka kufuta akaunti yako? Hatua hii haiwezi kubatilishwa.",
    },
    "account_deleted": {
        "en": "Account deleted successfully!",
        "sw": "Akaunti imefutwa kikamilifu!",
    },
    "account_delete_failed": {
        "en": "Failed to delete account",
        "sw": "Imeshindwa kufuta akaunti",
    },
    # ===== Share =====
    "share_text": {
        "en": "Job Opportunity: {title} in {location}. {description} Contact: {phone}",
        "sw": "Fursa ya Kazi: {title} katika {location}. {description} Wasiliana: {phone}",
    },
    # ===== Page labels =====
    "app_name": {"en": "Kazi Mashinani", "sw": "Kazi Mashinani"},
    "tagline": {
        "en": "Connecting Rural Talent with Opportunities",
        "sw": "Kuunganisha Watalanta Vijijini na Fursa",
    },
    "login": {"en": "Login", "sw": "Ingia"},
    "register": {"en": "Register", "sw": "Jisajili"},
    "logout": {"en": "Logout", "sw": "Toka"},
    "verify": {"en": "Verify", "sw": "Thibitisha"},
    "reset_password": {"en": "Reset Password", "sw": "Weka Upya Nenosiri"},
    "send_reset_code": {"en": "Send Reset Code", "sw": "Tuma Msimbo wa Kubadilisha"},
    "resend_code": {"en": "Resend code", "sw": "Tuma tena msimbo"},
    "job_seeker": {"en": "Job Seeker", "sw": "Mtafuta Kazi"},
    "employer": {"en": "Employer", "sw": "Mwajiri"},
    "section_home": {"en": "Home", "sw": "Nyumbani"},
    "section_jobs": {"en": "Available Jobs", "sw": "Kazi Zilizopo"},
    "section_favorites": {"en": "Favorites", "sw": "Vipendwa"},
    "section_post-job": {"en": "Post Job", "sw": "Tanga Kazi"},
    "section_find-workers": {"en": "Find Workers", "sw": "Tafuta Wafanyikazi"},
    "section_profile": {"en": "My Profile", "sw": "Wasifu Wangu"},
    "no_jobs": {
        "en": "No jobs available at the moment. Check back later!",
        "sw": "Hakuna kazi zinazopatikana kwa sasa. Angalia tena baadaye!",
    },
}


def translate(key: str, locale: Union[Locale, str, None] = None, **params) -> str:
    """
    Look up ``key`` for ``locale`` and format it with ``params``.

    Unknown locales fall back to Kiswahili, unknown keys to the key itself.
    """
    entry = MESSAGES.get(key)
    if entry is None:
        return key
    lang = locale.value if isinstance(locale, Locale) else (locale or DEFAULT_LOCALE.value)
    text = entry.get(lang) or entry[DEFAULT_LOCALE.value]
    return text.format(**params) if params else text
