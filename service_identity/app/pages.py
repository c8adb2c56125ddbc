"""
HTML pages hosting the client-side sign-in flow.

The pages load the Firebase JS SDK, sign the user in with Google and, on
the profile page, call ``/api/me`` with the user's ID token.
"""

import json
from string import Template

from shared.config import ServiceConfig

FIREBASE_SDK_VERSION = "11.3.0"

_SDK_BOOTSTRAP = Template("""\
        import { initializeApp } from "https://www.gstatic.com/firebasejs/$sdk_version/firebase-app.js";
        import { getAuth, connectAuthEmulator, signInWithPopup, GoogleAuthProvider, onAuthStateChanged, signOut } from "https://www.gstatic.com/firebasejs/$sdk_version/firebase-auth.js";

        const firebaseConfig = {
            apiKey: $api_key,
            authDomain: $auth_domain,
            projectId: $project_id
        };

        const app = initializeApp(firebaseConfig);
        const auth = getAuth(app);
$emulator_connect        const provider = new GoogleAuthProvider();
""")

_BASE_STYLE = """\
        body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; max-width: 600px; margin: 40px auto; padding: 0 20px; }
        .btn { padding: 10px 24px; font-size: 16px; border: none; border-radius: 6px; cursor: pointer; }
        .btn-signout { background: #f44336; color: white; }
        .btn-signout:hover { background: #d32f2f; }
        #loading { color: #666; }
        #error-msg { color: #f44336; margin-top: 10px; display: none; }
"""

_HOME_PAGE = Template("""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Hello, World!</title>
    <style>
$base_style        .auth-section { margin-top: 20px; padding: 20px; border: 1px solid #ddd; border-radius: 8px; }
        .user-info { display: flex; align-items: center; gap: 12px; }
        .btn-signin { background: #4285f4; color: white; }
        .btn-signin:hover { background: #3367d6; }
        .btn-profile { background: #4caf50; color: white; text-decoration: none; display: inline-block; }
        .btn-profile:hover { background: #388e3c; }
    </style>
</head>
<body>
    <h1>Hello, World!</h1>

    <div class="auth-section">
        <div id="loading">Loading...</div>
        <div id="signed-out" style="display:none">
            <p>You are not signed in.</p>
            <button class="btn btn-signin" id="signin-btn">Sign in with Google</button>
        </div>
        <div id="signed-in" style="display:none">
            <div class="user-info">
                <span>Welcome, <strong id="user-name"></strong></span>
            </div>
            <div style="margin-top: 12px; display: flex; gap: 8px;">
                <a href="/profile" class="btn btn-profile">View Profile</a>
                <button class="btn btn-signout" id="signout-btn">Sign out</button>
            </div>
        </div>
        <div id="error-msg"></div>
    </div>

    <script type="module">
$bootstrap
        const loadingEl = document.getElementById("loading");
        const signedOutEl = document.getElementById("signed-out");
        const signedInEl = document.getElementById("signed-in");
        const userNameEl = document.getElementById("user-name");
        const errorEl = document.getElementById("error-msg");

        function showError(prefix, err) {
            errorEl.textContent = prefix + err.message;
            errorEl.style.display = "block";
        }

        onAuthStateChanged(auth, (user) => {
            loadingEl.style.display = "none";
            signedInEl.style.display = user ? "block" : "none";
            signedOutEl.style.display = user ? "none" : "block";
            if (user) {
                userNameEl.textContent = user.displayName || user.email;
            }
        });

        document.getElementById("signin-btn").addEventListener("click", async () => {
            try {
                await signInWithPopup(auth, provider);
            } catch (err) {
                if (err.code === "auth/popup-closed-by-user" || err.code === "auth/cancelled-popup-request") {
                    return;
                }
                showError("Sign-in failed: ", err);
            }
        });

        document.getElementById("signout-btn").addEventListener("click", async () => {
            try {
                await signOut(auth);
            } catch (err) {
                showError("Sign-out failed: ", err);
            }
        });
    </script>
</body>
</html>
""")

_PROFILE_PAGE = Template("""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Profile</title>
    <style>
$base_style        .profile-card { padding: 24px; border: 1px solid #ddd; border-radius: 8px; }
        .profile-header { display: flex; align-items: center; gap: 16px; margin-bottom: 16px; }
        .profile-pic { width: 80px; height: 80px; border-radius: 50%; object-fit: cover; background: #e0e0e0; }
        .placeholder-pic { width: 80px; height: 80px; border-radius: 50%; background: #9e9e9e; display: flex; align-items: center; justify-content: center; color: white; font-size: 32px; }
        .profile-details dt { font-weight: bold; color: #555; margin-top: 8px; }
        .profile-details dd { margin-left: 0; }
        .btn-home { background: #2196f3; color: white; text-decoration: none; display: inline-block; margin-top: 16px; margin-right: 8px; }
        .btn-home:hover { background: #1976d2; }
    </style>
</head>
<body>
    <h1>Profile</h1>

    <div id="loading">Loading profile...</div>
    <div id="profile-card" class="profile-card" style="display:none">
        <div class="profile-header">
            <div id="pic-container"></div>
            <div>
                <h2 id="profile-name" style="margin:0"></h2>
                <p id="profile-email" style="margin:4px 0 0 0; color:#666"></p>
            </div>
        </div>
        <dl class="profile-details">
            <dt>User ID</dt>
            <dd id="profile-uid"></dd>
        </dl>
        <div>
            <a href="/" class="btn btn-home">Home</a>
            <button class="btn btn-signout" id="signout-btn">Sign out</button>
        </div>
    </div>
    <div id="error-msg"></div>

    <script type="module">
$bootstrap
        const loadingEl = document.getElementById("loading");
        const profileCard = document.getElementById("profile-card");
        const errorEl = document.getElementById("error-msg");

        function showError(prefix, err) {
            errorEl.textContent = prefix + err.message;
            errorEl.style.display = "block";
            loadingEl.style.display = "none";
        }

        function renderPicture(profile) {
            const container = document.getElementById("pic-container");
            container.replaceChildren();
            if (profile.picture) {
                const img = document.createElement("img");
                img.className = "profile-pic";
                img.src = profile.picture;
                img.alt = "Profile picture";
                img.referrerPolicy = "no-referrer";
                container.appendChild(img);
            } else {
                const placeholder = document.createElement("div");
                placeholder.className = "placeholder-pic";
                placeholder.textContent = (profile.name || "?")[0].toUpperCase();
                container.appendChild(placeholder);
            }
        }

        onAuthStateChanged(auth, async (user) => {
            if (!user) {
                loadingEl.textContent = "Redirecting to sign in...";
                try {
                    await signInWithPopup(auth, provider);
                } catch (err) {
                    if (err.code === "auth/popup-closed-by-user" || err.code === "auth/cancelled-popup-request") {
                        loadingEl.textContent = "Sign-in was cancelled. Please sign in to view your profile.";
                        return;
                    }
                    showError("Sign-in failed: ", err);
                }
                return;
            }

            try {
                const idToken = await user.getIdToken();
                const resp = await fetch("/api/me", {
                    headers: { "Authorization": "Bearer " + idToken }
                });

                if (!resp.ok) {
                    const errData = await resp.json();
                    throw new Error(errData.error?.message || "Failed to load profile");
                }

                const profile = await resp.json();
                document.getElementById("profile-name").textContent = profile.name || "Unknown";
                document.getElementById("profile-email").textContent = profile.email || "";
                document.getElementById("profile-uid").textContent = profile.uid || "";
                renderPicture(profile);

                loadingEl.style.display = "none";
                profileCard.style.display = "block";
            } catch (err) {
                showError("Error loading profile: ", err);
            }
        });

        document.getElementById("signout-btn").addEventListener("click", async () => {
            try {
                await signOut(auth);
            } catch (err) {
                showError("Sign-out failed: ", err);
            }
        });
    </script>
</body>
</html>
""")


def _js_string(value: str) -> str:
    """Quote ``value`` as a JS string literal safe inside an inline <script>."""
    return json.dumps(value).replace("</", "<\\/")


def _bootstrap_script(config: ServiceConfig) -> str:
    emulator_connect = ""
    if config.emulator_enabled:
        emulator_url = _js_string("http://" + config.firebase_auth_emulator_host.strip())
        emulator_connect = (
            f"        connectAuthEmulator(auth, {emulator_url}, {{ disableWarnings: true }});\n"
        )

    return _SDK_BOOTSTRAP.substitute(
        sdk_version=FIREBASE_SDK_VERSION,
        api_key=_js_string(config.firebase_api_key),
        auth_domain=_js_string(config.firebase_auth_domain),
        project_id=_js_string(config.firebase_project_id),
        emulator_connect=emulator_connect,
    )


def render_home_page(config: ServiceConfig) -> str:
    return _HOME_PAGE.substitute(base_style=_BASE_STYLE, bootstrap=_bootstrap_script(config))


def render_profile_page(config: ServiceConfig) -> str:
    return _PROFILE_PAGE.substitute(base_style=_BASE_STYLE, bootstrap=_bootstrap_script(config))
