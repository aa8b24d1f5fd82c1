# portfolio/data.py
# Seed content shown until the admin saves real data.

PERSONAL_INFO = {
    "name": "Jordan Avery Reyes",
    "shortName": "Jordan Reyes",
    "title": "Data Scientist / ML Engineer",
    "subtitle": "B.Tech (IT) Student",
    "description": "Student passionate about using data and machine learning to solve real-world problems.",
    "about": (
        "I'm an Information Technology student with a strong foundation in programming, "
        "machine learning and data science, building ML models, web applications and system tools."
    ),
    "location": "Hyderabad, India",
    "email": "jordan.reyes@example.com",
    "phone": "+91 90000 00000",
    "github": "https://github.com/example",
    "linkedin": "https://linkedin.com/in/example",
    "cgpa": "9.1/10",
    "graduation": "Jun 2026 (Expected)",
}

TECHNICAL_SKILLS = [
    {
        "category": "Programming Languages",
        "skills": ["C", "Python", "Java", "JavaScript", "Shell scripting"],
    },
    {
        "category": "Machine Learning & AI",
        "skills": ["scikit-learn", "Pandas", "NumPy", "Matplotlib", "LSTM", "NLP (TF-IDF)"],
    },
    {
        "category": "Web Frontend",
        "skills": ["HTML5", "CSS3", "Bootstrap", "React.js"],
    },
    {
        "category": "Tools & Databases",
        "skills": ["Linux/Unix", "Git", "MySQL", "Power BI", "Streamlit", "Flask"],
    },
]

PROJECTS = [
    {
        "id": 1,
        "title": "Process-Hunter",
        "subtitle": "System Process Analysis Tool",
        "description": "C program that reads process details from /proc by PID: command line, state, PPID, memory, threads.",
        "technologies": ["C", "Linux", "System Programming"],
        "githubUrl": "https://github.com/example/process-hunter",
        "liveUrl": "",
        "year": "2025",
        "featured": True,
    },
    {
        "id": 2,
        "title": "DataVista",
        "subtitle": "Automated EDA Tool",
        "description": "No-code EDA app: upload datasets, descriptive stats, outlier detection, correlation heatmaps.",
        "technologies": ["Python", "Streamlit", "Pandas"],
        "githubUrl": "https://github.com/example/datavista",
        "liveUrl": "",
        "year": "2025",
        "featured": True,
    },
    {
        "id": 3,
        "title": "Stock Price Prediction",
        "subtitle": "LSTM Time Series Forecasting",
        "description": "LSTM forecasting model for historical stock data with a Flask demo app.",
        "technologies": ["Python", "LSTM", "TensorFlow", "Flask"],
        "githubUrl": "https://github.com/example/stock-trend",
        "liveUrl": "",
        "year": "2024",
        "featured": False,
    },
]

EXPERIENCE = [
    {
        "id": 1,
        "title": "Intern - Generative AI",
        "company": "Cloud Lab",
        "location": "Remote",
        "period": "May 2025 - Jul 2025",
        "type": "Internship",
        "description": [
            "Explored generative AI proof-of-concept deployments",
            "Implemented demo models and studied inference pipelines",
        ],
    },
    {
        "id": 2,
        "title": "Student Mentor",
        "company": "Community Foundation",
        "location": "Remote",
        "period": "Jul 2024 - Present",
        "type": "Part-time",
        "description": [
            "Mentored fellow students in skill-building initiatives",
            "Organized learning sessions and career-prep workshops",
        ],
    },
]

EDUCATION = [
    {
        "id": 1,
        "institution": "State Engineering College",
        "degree": "B.Tech in Information Technology",
        "location": "Andhra Pradesh",
        "period": "Oct 2022 - Jun 2026 (Expected)",
        "grade": "CGPA: 9.1/10",
        "coursework": ["Operating Systems", "Computer Networks", "DBMS", "Machine Learning"],
    },
    {
        "id": 2,
        "institution": "Junior College",
        "degree": "Intermediate (MPC)",
        "location": "Andhra Pradesh",
        "period": "2020 - 2022",
        "grade": "Score: 93.5%",
    },
]

CERTIFICATIONS = [
    {
        "id": 1,
        "title": "Java Programming [Beginner to Advanced]",
        "issuer": "GeeksforGeeks",
        "year": "2025",
        "skills": ["OOP", "Collections", "Multithreading"],
        "verificationUrl": "",
    },
    {
        "id": 2,
        "title": "Analyzing Data with Python",
        "issuer": "edX",
        "year": "2024",
        "skills": ["Pandas", "NumPy", "Matplotlib"],
        "verificationUrl": "",
    },
]

ACHIEVEMENTS = [
    {
        "id": 1,
        "title": "Undergraduate Scholar",
        "description": "Awarded for academic excellence and leadership potential",
    },
    {
        "id": 2,
        "title": "Academic Excellence",
        "description": "Consistent high performance with 9.1 CGPA",
    },
]

QUICK_FACTS = {
    "location": "Hyderabad, India",
    "cgpa": "CGPA: 9.1/10",
    "graduation": "Expected Graduation: Jun 2026",
    "scholarship": "Undergraduate Scholar",
}

CURRENT_FOCUS = [
    {
        "title": "Machine Learning & AI",
        "description": "Building predictive models and exploring generative AI",
        "icon": "robot",
    },
    {
        "title": "Open Source Contribution",
        "description": "Contributing to the developer community through GitHub",
        "icon": "rocket",
    },
]
